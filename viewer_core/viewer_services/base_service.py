"""
    Generic base service for entity query operations.

    Design Pattern: Template Method
    ─────────────────────────────────
    Defines the skeleton of an entity query (validate → match each entity →
    keep the matching ones in input order), letting concrete subclasses
    (NamespaceFilterService, SearchService) override the specific steps.

    Genericity:
    ─────────────────────────
    Uses Generic[TQuery] so each service explicitly declares its query type.
"""
from abc import ABC, abstractmethod
from typing import Generic, Iterable, List, Set, TypeVar

from schema_api.models.entity import Entity

# Generic type variable for the query parameter
TQuery = TypeVar('TQuery')


class EntityQueryService(ABC, Generic[TQuery]):
    """
    Abstract generic base for all services that narrow a list of entities.

    Concrete subclasses must implement:
        - _validate_query(query)   → raise on invalid input
        - _matches(entity, query)  → whether one entity passes
    """

    def execute(self, entities: Iterable[Entity], query: TQuery) -> List[Entity]:
        """
        Template Method: validate → match → collect.

        Args:
            entities: Entities to narrow (order is preserved).
            query:    Query object (type depends on the concrete service).

        Returns:
            The matching entities, in input order.
        """
        self._validate_query(query)
        return [e for e in entities if self._matches(e, query)]

    def matching_ids(self, entities: Iterable[Entity], query: TQuery) -> Set[str]:
        """IDs of the matching entities."""
        return {e.entity_id for e in self.execute(entities, query)}

    @abstractmethod
    def _validate_query(self, query: TQuery) -> None:
        """
        Validate the query; raise an appropriate exception on failure.
        """
        ...

    @abstractmethod
    def _matches(self, entity: Entity, query: TQuery) -> bool:
        """
        Return True if the entity satisfies the query.
        """
        ...
