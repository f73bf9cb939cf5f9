from setuptools import setup, find_packages

setup(
    name='schema-source-xml',
    version='1.0.0',
    description='XML Schema Source Plugin for Schema Graph Viewer',
    packages=find_packages(),
    install_requires=[
        'schema-graph-api',
        'lxml>=6.0.0'
    ],
    entry_points={
        'schema_viewer.schema_source': [
            'xml = schema_source_xml.plugin:XmlSchemaSourcePlugin',
        ],
    },
    python_requires='>=3.10',
)
