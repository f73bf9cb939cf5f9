# viewer_services/filter_service.py
"""
    NamespaceFilterService — keeps entities whose namespace is selected.

    Extends ``EntityQueryService[AbstractSet[str]]`` (Template Method + Genericity).
"""
from collections.abc import Set as _SetABC
from typing import AbstractSet, Iterable, List

from schema_api.models.entity import Entity
from .base_service import EntityQueryService
from .exceptions import NamespaceFilterError


class NamespaceFilterService(EntityQueryService[AbstractSet[str]]):
    """
    Filters entities by namespace membership.

    The query is the set of selected namespace names. An empty selection
    keeps nothing.
    """

    # ── Public convenience method ────────────────────────────────

    def filter(self, entities: Iterable[Entity], selected: AbstractSet[str]) -> List[Entity]:
        """
        Convenience wrapper around the generic ``execute()``.

        :param entities: Entities to filter
        :param selected: Selected namespace names
        :return: Entities whose namespace is selected
        :raises NamespaceFilterError: If the selection is not a set of names
        """
        return self.execute(entities, selected)

    # ── Template Method hooks ────────────────────────────────────

    def _validate_query(self, query: AbstractSet[str]) -> None:
        """Only a set of names is accepted; a bare string would match by character."""
        if not isinstance(query, _SetABC):
            raise NamespaceFilterError("Namespace selection must be a set of names.")

    def _matches(self, entity: Entity, query: AbstractSet[str]) -> bool:
        return entity.namespace in query
