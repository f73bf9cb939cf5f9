# viewer_services/search_service.py
"""
    SearchService — matches entities by name or namespace name.

    Extends ``EntityQueryService[str]`` (Template Method + Genericity).
"""
from typing import Iterable, List

from schema_api.models.entity import Entity
from .base_service import EntityQueryService
from .exceptions import SearchQueryError


class SearchService(EntityQueryService[str]):
    """
    Case-insensitive substring search:
    - ""      → every entity
    - "ord"   → entities whose name or namespace contains "ord" (any case)
    """

    def search(self, entities: Iterable[Entity], term: str) -> List[Entity]:
        """
        Convenience wrapper around the generic ``execute()``.

        :param entities: Entities to search
        :param term: Search term (may be empty)
        :return: Matching entities in input order
        :raises SearchQueryError: If term is not a string
        """
        return self.execute(entities, term)

    def _validate_query(self, query: str) -> None:
        if not isinstance(query, str):
            raise SearchQueryError("Search term must be a string.")

    def _matches(self, entity: Entity, query: str) -> bool:
        return entity.matches_text(query)
