from .position import Position
from .entity import Attribute, Entity
from .relationship import Relationship
from .namespace import NamespaceInfo, NamespaceSchema
from .snapshot import SchemaSnapshot, build_reference_index, group_by_namespace
from .view import (
    GraphView,
    RenderedEntity,
    RenderedRelationship,
    NamespaceOption,
    StatusStrip,
    Legend,
    LegendEntry,
    EntityDetail,
)

__all__ = [
    'Position',
    'Attribute',
    'Entity',
    'Relationship',
    'NamespaceInfo',
    'NamespaceSchema',
    'SchemaSnapshot',
    'build_reference_index',
    'group_by_namespace',
    'GraphView',
    'RenderedEntity',
    'RenderedRelationship',
    'NamespaceOption',
    'StatusStrip',
    'Legend',
    'LegendEntry',
    'EntityDetail',
]
