from .plugin import XmlSchemaSource, XmlSchemaSourcePlugin

__all__ = ['XmlSchemaSource', 'XmlSchemaSourcePlugin']
