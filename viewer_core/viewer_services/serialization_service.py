"""
    Serialization of derived views and schema snapshots.

    Design Pattern: Strategy (serialization strategy is configurable)
    ─────────────────────────────────────────────────────────────────
    The ``SerializationConfig`` acts as a strategy that determines
    which parts of a view are emitted and how coordinates are rounded.

    Also provides Factory Method for deserialization:
        SchemaSnapshot.to_dict  →  SnapshotSerializer.deserialize
"""
import json
from typing import Any, Dict, Optional

from schema_api.models.entity import Entity
from schema_api.models.namespace import NamespaceInfo
from schema_api.models.position import Position
from schema_api.models.relationship import Relationship
from schema_api.models.snapshot import SchemaSnapshot
from schema_api.models.view import EntityDetail, GraphView, Legend

from viewer_platform.config import SerializationConfig


class ViewSerializer:
    """
    Serialize ``GraphView`` records for render adapters.

    Usage:
        serializer = ViewSerializer(SerializationConfig(include_detail=False))
        data = serializer.serialize(view)        # → dict
        json_str = serializer.to_json(view)      # → str
    """

    def __init__(self, config: Optional[SerializationConfig] = None):
        self._config = config or SerializationConfig()

    @property
    def config(self) -> SerializationConfig:
        return self._config

    @config.setter
    def config(self, value: SerializationConfig) -> None:
        self._config = value

    def serialize(self, view: GraphView) -> Dict[str, Any]:
        """
        Convert a GraphView to a plain dictionary respecting the
        current SerializationConfig.
        """
        result: Dict[str, Any] = {
            'zoom': view.zoom,
            'pan': self._position(view.pan),
            'loading': view.loading,
            'error': view.error,
            'can_refresh': view.can_refresh,
            'entities': [self._serialize_entity(r) for r in view.entities],
            'relationships': [self._serialize_relationship(r) for r in view.relationships],
            'namespaces': [
                {
                    'name': opt.name,
                    'selected': opt.selected,
                    'marketplace': opt.from_marketplace,
                    'system': opt.is_system,
                    'color': opt.color,
                }
                for opt in view.namespaces
            ],
        }

        if view.status is not None:
            result['status'] = {
                'entities': view.status.entity_count,
                'relationships': view.status.relationship_count,
                'namespaces': view.status.namespace_count,
                'zoom_percent': view.status.zoom_percent,
            }
        if self._config.include_legend:
            result['legend'] = self._serialize_legend(view.legend)
        if self._config.include_detail:
            result['detail'] = self._serialize_detail(view.detail)
        return result

    def to_json(self, view: GraphView, *, indent: int = 2) -> str:
        """Serialize a GraphView directly to a JSON string."""
        return json.dumps(self.serialize(view), indent=indent, default=str)

    def _serialize_entity(self, rendered) -> Dict[str, Any]:
        entity = rendered.entity
        result: Dict[str, Any] = {
            'id': entity.entity_id,
            'name': entity.name,
            'namespace': entity.namespace,
            'position': self._position(rendered.position),
            'color': rendered.color,
            'selected': rendered.is_selected,
        }
        if self._config.include_attributes:
            result['attributes'] = [a.to_dict() for a in entity.attributes]
        return result

    def _serialize_relationship(self, rendered) -> Dict[str, Any]:
        rel = rendered.relationship
        return {
            'id': rel.relationship_id,
            'name': rel.name,
            'source': self._position(rendered.source_position),
            'target': self._position(rendered.target_position),
            'kind': rel.kind.value,
            'label': rendered.label,
            'dashed': rendered.is_dashed,
            'cross_namespace': rendered.is_cross_namespace,
            'highlighted': rendered.is_highlighted,
            'color': rendered.color,
        }

    @staticmethod
    def _serialize_legend(legend: Legend) -> Dict[str, Any]:
        return {
            'relationship_kinds': [
                {'label': e.label, 'color': e.color, 'dashed': e.dashed}
                for e in legend.relationship_kinds
            ],
            'namespaces': [{'label': e.label, 'color': e.color} for e in legend.namespaces],
            'hidden_namespaces': legend.hidden_namespace_count,
        }

    @staticmethod
    def _serialize_detail(detail: Optional[EntityDetail]) -> Optional[Dict[str, Any]]:
        if detail is None:
            return None
        return {
            'entity': detail.entity.to_dict(),
            'generalization_chain': [e.entity_id for e in detail.generalization_chain],
            'related_relationships': [r.to_dict() for r in detail.related_relationships],
        }

    def _position(self, position: Position) -> Dict[str, float]:
        digits = self._config.position_digits
        if digits is None:
            return position.to_dict()
        return {'x': round(position.x, digits), 'y': round(position.y, digits)}


class SnapshotSerializer:
    """
    Serialize / deserialize ``SchemaSnapshot`` instances.

    The dictionary layout is the export format read by the JSON schema
    source plugin.

    Usage:
        serializer = SnapshotSerializer()
        data = serializer.serialize(snapshot)        # → dict
        snapshot = serializer.from_json(json_str)    # → SchemaSnapshot
    """

    def serialize(self, snapshot: SchemaSnapshot) -> Dict[str, Any]:
        return snapshot.to_dict()

    def to_json(self, snapshot: SchemaSnapshot, *, indent: int = 2) -> str:
        """Serialize a SchemaSnapshot directly to a JSON string."""
        return json.dumps(self.serialize(snapshot), indent=indent, default=str)

    def deserialize(self, data: Dict[str, Any]) -> SchemaSnapshot:
        """
        Reconstruct a SchemaSnapshot from a dictionary (inverse of ``serialize``).

        Raises:
            ValueError: On duplicate identifiers or a malformed payload.
        """
        try:
            namespaces = [NamespaceInfo.from_dict(ns) for ns in data.get('namespaces', [])]
            entities = [Entity.from_dict(e) for e in data.get('entities', [])]
            relationships = [Relationship.from_dict(r) for r in data.get('relationships', [])]
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed snapshot payload: {exc}") from exc

        return SchemaSnapshot(entities, relationships, namespaces,
                              snapshot_id=data.get('id'))

    def from_json(self, json_str: str) -> SchemaSnapshot:
        """Deserialize a SchemaSnapshot from a JSON string."""
        return self.deserialize(json.loads(json_str))
