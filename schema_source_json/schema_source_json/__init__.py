from .plugin import JsonSchemaSource, JsonSchemaSourcePlugin

__all__ = ['JsonSchemaSource', 'JsonSchemaSourcePlugin']
