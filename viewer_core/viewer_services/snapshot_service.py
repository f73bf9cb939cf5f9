# viewer_services/snapshot_service.py
"""
    SnapshotBuilder — performs one full fetch against a schema source.

    Enumerates namespaces, asks the source for each namespace's schema and
    assembles an immutable ``SchemaSnapshot``. Any exception raised by the
    source aborts the fetch as a ``FetchFailure``; a namespace without a
    schema simply contributes nothing.
"""
import logging
from typing import AbstractSet, List, Optional

from schema_api.models.entity import Entity
from schema_api.models.namespace import NamespaceInfo
from schema_api.models.relationship import Relationship
from schema_api.models.snapshot import SchemaSnapshot, build_reference_index
from schema_api.plugins.base import SchemaSource

from .exceptions import FetchFailure

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_NAMESPACES = frozenset({"System"})


class SnapshotBuilder:
    """
    Builds snapshots from a ``SchemaSource``.

    Usage:
        builder = SnapshotBuilder(system_namespaces={"System"})
        snapshot = builder.fetch(source)
    """

    def __init__(self, system_namespaces: Optional[AbstractSet[str]] = None):
        self._system_namespaces = frozenset(
            DEFAULT_SYSTEM_NAMESPACES if system_namespaces is None else system_namespaces
        )

    def fetch(self, source: SchemaSource) -> SchemaSnapshot:
        """
        Fetch every namespace's schema and build a snapshot.

        :param source: Host collaborator
        :return: New snapshot
        :raises FetchFailure: If the source fails at any step
        """
        try:
            listed = list(source.list_namespaces())
        except FetchFailure:
            raise
        except Exception as exc:
            raise FetchFailure(f"Could not list namespaces: {exc}") from exc

        namespaces: List[NamespaceInfo] = []
        entities: List[Entity] = []
        relationships: List[Relationship] = []

        for info in listed:
            namespaces.append(info.with_system_flag(info.name in self._system_namespaces))

            try:
                schema = source.get_schema_for(info.name)
            except FetchFailure:
                raise
            except Exception as exc:
                raise FetchFailure(
                    f"Could not load schema of '{info.name}': {exc}", namespace=info.name
                ) from exc

            if schema is None:
                logger.debug("Namespace '%s' has no schema.", info.name)
                continue

            entities.extend(schema.entities)
            relationships.extend(r.with_cross_namespace(False) for r in schema.relationships)
            relationships.extend(r.with_cross_namespace(True)
                                 for r in schema.cross_namespace_relationships)

        relationships = self._reconcile_cross_namespace(entities, relationships)
        try:
            snapshot = SchemaSnapshot(entities, relationships, namespaces)
        except ValueError as exc:
            raise FetchFailure(f"Inconsistent schema: {exc}") from exc
        logger.info("Snapshot %s fetched: %d namespaces, %d entities, %d relationships",
                    snapshot.snapshot_id[:8], len(namespaces), len(entities), len(relationships))
        return snapshot

    @staticmethod
    def _reconcile_cross_namespace(entities: List[Entity],
                                   relationships: List[Relationship]) -> List[Relationship]:
        """
        Where both endpoints resolve, the flag follows the endpoints'
        namespaces; otherwise the host's classification is kept.
        """
        index = build_reference_index(entities)
        by_id = {e.entity_id: e for e in entities}

        result = []
        for rel in relationships:
            source_id = index.get(rel.source)
            target_id = index.get(rel.target)
            if source_id is not None and target_id is not None:
                crosses = by_id[source_id].namespace != by_id[target_id].namespace
                rel = rel.with_cross_namespace(crosses)
            result.append(rel)
        return result
