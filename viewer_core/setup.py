from setuptools import setup, find_packages

setup(
    name='schema-graph-viewer-core',
    version='1.0.0',
    description='Layout engine, interaction state and platform for Schema Graph Viewer',
    packages=find_packages(),
    install_requires=[
        'schema-graph-api',
    ],
    extras_require={
        'test': [
            'pytest>=7.0.0',
        ],
    },
    python_requires='>=3.10',
)
