import json
import os
from typing import Any, Dict, List, Optional, Set

from schema_api.models.entity import Entity
from schema_api.models.namespace import NamespaceInfo, NamespaceSchema
from schema_api.models.relationship import Relationship
from schema_api.models.snapshot import build_reference_index
from schema_api.plugins.base import SchemaSource, SchemaSourcePlugin


class _Document:
    """One parsed export file, split per namespace."""

    def __init__(self, data: Dict[str, Any]):
        if not isinstance(data, dict):
            raise ValueError("Schema export must be a JSON object.")

        self.namespaces: List[NamespaceInfo] = []
        self.without_schema: Set[str] = set()
        seen: Set[str] = set()
        for raw in data.get('namespaces', []):
            info = NamespaceInfo.from_dict(raw)
            if raw.get('has_schema') is False:
                self.without_schema.add(info.name)
            if info.name not in seen:
                seen.add(info.name)
                self.namespaces.append(info)

        self.entities: List[Entity] = [Entity.from_dict(e) for e in data.get('entities', [])]
        # Namespaces only mentioned by entities are listed after the declared ones
        for entity in self.entities:
            if entity.namespace not in seen:
                seen.add(entity.namespace)
                self.namespaces.append(NamespaceInfo(entity.namespace))

        index = build_reference_index(self.entities)
        namespace_of = {e.entity_id: e.namespace for e in self.entities}
        fallback = self.namespaces[0].name if self.namespaces else None

        self.owned: Dict[str, List[Relationship]] = {}
        for raw in data.get('relationships', []):
            rel = Relationship.from_dict(raw)
            owner = raw.get('namespace') or namespace_of.get(index.get(rel.source), fallback)
            if owner is not None:
                self.owned.setdefault(owner, []).append(rel)


class JsonSchemaSource(SchemaSource):
    """
    Schema source backed by a JSON export.

    The file is re-read on every ``list_namespaces`` call, so a refresh
    picks up edits made to the export in the meantime.
    """

    def __init__(self, file_path: str):
        self._file_path = file_path
        self._document: Optional[_Document] = None

    @property
    def file_path(self) -> str:
        return self._file_path

    def list_namespaces(self) -> List[NamespaceInfo]:
        self._document = self._read()
        return list(self._document.namespaces)

    def get_schema_for(self, namespace: str) -> Optional[NamespaceSchema]:
        document = self._document or self._read()
        if namespace in document.without_schema:
            return None

        entities = [e for e in document.entities if e.namespace == namespace]
        owned = document.owned.get(namespace, [])
        return NamespaceSchema(
            entities=entities,
            relationships=[r for r in owned if not r.is_cross_namespace],
            cross_namespace_relationships=[r for r in owned if r.is_cross_namespace],
        )

    def _read(self) -> _Document:
        with open(self._file_path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
        try:
            return _Document(data)
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed schema export '{self._file_path}': {exc}") from exc


class JsonSchemaSourcePlugin(SchemaSourcePlugin):

    def get_plugin_name(self) -> str:
        return "JSON Schema Export"

    def open(self, location: str) -> JsonSchemaSource:
        if not os.path.isfile(location):
            raise FileNotFoundError(f"Schema export not found: {location}")
        return JsonSchemaSource(location)
