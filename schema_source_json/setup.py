from setuptools import setup, find_packages

setup(
    name='schema-source-json',
    version='1.0.0',
    description='JSON Schema Source Plugin for Schema Graph Viewer',
    packages=find_packages(),
    install_requires=[
        'schema-graph-api',
    ],
    entry_points={
        'schema_viewer.schema_source': [
            'json = schema_source_json.plugin:JsonSchemaSourcePlugin',
        ],
    },
    python_requires='>=3.10',
)
