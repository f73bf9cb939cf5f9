"""
Schema Graph API — schema models, view record and plugin contracts.
"""
from .types import AttributeType, RelationshipKind, TypeResolver
from .models.position import Position
from .models.entity import Attribute, Entity
from .models.relationship import Relationship
from .models.namespace import NamespaceInfo, NamespaceSchema
from .models.snapshot import SchemaSnapshot
from .models.view import GraphView
from .plugins.base import SchemaSource, SchemaSourcePlugin, RenderAdapterPlugin

__all__ = [
    'AttributeType',
    'RelationshipKind',
    'TypeResolver',
    'Position',
    'Attribute',
    'Entity',
    'Relationship',
    'NamespaceInfo',
    'NamespaceSchema',
    'SchemaSnapshot',
    'GraphView',
    'SchemaSource',
    'SchemaSourcePlugin',
    'RenderAdapterPlugin',
]
