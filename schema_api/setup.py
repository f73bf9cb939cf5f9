from setuptools import setup, find_packages

setup(
    name='schema-graph-api',
    version='1.0.0',
    description='API library with schema models and plugin contracts for Schema Graph Viewer',
    packages=find_packages(),
    python_requires='>=3.10',
)
