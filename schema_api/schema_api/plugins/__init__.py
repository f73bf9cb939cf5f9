"""
Plugin contracts — abstract base classes for schema sources and render adapters.
"""
from .base import SchemaSource, SchemaSourcePlugin, RenderAdapterPlugin

__all__ = ['SchemaSource', 'SchemaSourcePlugin', 'RenderAdapterPlugin']
