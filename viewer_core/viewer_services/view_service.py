# viewer_services/view_service.py
"""
    ViewService — derives the render set from a snapshot and the viewer state.

    The derived view is never stored: it is a pure function of
    ``(snapshot, state)`` recomputed whenever the state changes.

    Pipeline:
        1. NamespaceFilterService → entities of selected namespaces
        2. SearchService          → entities matching the search term
        3. relationships with both endpoints among the visible entities
        4. highlight flags for relationships touching the selected entity
        5. positions (override, else layout), colours, legend, status, detail
"""
from typing import Dict, List, Optional, Set

from schema_api.models.entity import Entity
from schema_api.models.relationship import Relationship
from schema_api.models.snapshot import SchemaSnapshot
from schema_api.models.view import (
    EntityDetail,
    GraphView,
    Legend,
    LegendEntry,
    NamespaceOption,
    RenderedEntity,
    RenderedRelationship,
    StatusStrip,
)

from viewer_platform.config import ViewerConfig
from viewer_platform.state import ViewerState

from .filter_service import NamespaceFilterService
from .search_service import SearchService


class ViewService:
    """
    Builds ``GraphView`` records for render adapters.

    Usage:
        service = ViewService(ViewerConfig())
        view = service.derive(snapshot, state)
    """

    def __init__(self, config: Optional[ViewerConfig] = None):
        self._config = config or ViewerConfig()
        self._filter_service = NamespaceFilterService()
        self._search_service = SearchService()

    @property
    def config(self) -> ViewerConfig:
        return self._config

    # ── Filtering ────────────────────────────────────────────────

    def filter_entities(self, snapshot: SchemaSnapshot, state: ViewerState) -> List[Entity]:
        """Entities in a selected namespace that match the search term."""
        entities = self._filter_service.filter(snapshot.entities, state.selected_namespaces)
        return self._search_service.search(entities, state.search_term)

    def filter_relationships(self, snapshot: SchemaSnapshot,
                             visible: List[Entity]) -> List[Relationship]:
        """Relationships whose both endpoints resolve to a visible entity."""
        visible_ids = {e.entity_id for e in visible}
        result = []
        for rel in snapshot.relationships:
            source_id, target_id = snapshot.resolve_endpoints(rel)
            if source_id in visible_ids and target_id in visible_ids:
                result.append(rel)
        return result

    def highlighted_relationship_ids(self, snapshot: SchemaSnapshot,
                                     relationships: List[Relationship],
                                     selected: Optional[str]) -> Set[str]:
        """Ids of relationships whose resolved endpoints include the selected entity."""
        if selected is None:
            return set()
        return {
            rel.relationship_id for rel in relationships
            if selected in snapshot.resolve_endpoints(rel)
        }

    # ── Derivation ───────────────────────────────────────────────

    def derive(self, snapshot: Optional[SchemaSnapshot], state: ViewerState,
               loading: bool = False, error: Optional[str] = None,
               can_refresh: bool = True) -> GraphView:
        """
        Derive the complete render record.

        Args:
            snapshot:    Current snapshot (``None`` before the first load).
            state:       Current interaction state.
            loading:     A fetch is pending.
            error:       User-visible error message, if any.
            can_refresh: Whether the refresh trigger is enabled.
        """
        if snapshot is None:
            return GraphView(
                zoom=state.zoom,
                pan=state.pan,
                status=StatusStrip(0, 0, 0, state.zoom_percent),
                loading=loading,
                error=error,
                can_refresh=can_refresh,
            )

        colors = self._namespace_colors(snapshot)
        visible = self.filter_entities(snapshot, state)
        visible_rels = self.filter_relationships(snapshot, visible)
        highlighted = self.highlighted_relationship_ids(
            snapshot, visible_rels, state.selected_entity)

        rendered_entities = []
        for entity in visible:
            position = state.position_of(entity.entity_id)
            if position is None:
                continue
            rendered_entities.append(RenderedEntity(
                entity=entity,
                position=position,
                color=colors.get(entity.namespace, self._config.namespace_color(-1)),
                is_selected=entity.entity_id == state.selected_entity,
            ))

        rendered_rels = []
        for rel in visible_rels:
            source_id, target_id = snapshot.resolve_endpoints(rel)
            source_pos = state.position_of(source_id)
            target_pos = state.position_of(target_id)
            if source_pos is None or target_pos is None:
                continue
            rendered_rels.append(RenderedRelationship(
                relationship=rel,
                source_position=source_pos,
                target_position=target_pos,
                is_highlighted=rel.relationship_id in highlighted,
                color=(self._config.cross_namespace_color if rel.is_cross_namespace
                       else self._config.same_namespace_color),
            ))

        return GraphView(
            entities=rendered_entities,
            relationships=rendered_rels,
            zoom=state.zoom,
            pan=state.pan,
            namespaces=self._namespace_options(snapshot, state, colors),
            status=StatusStrip(
                entity_count=len(rendered_entities),
                relationship_count=len(rendered_rels),
                namespace_count=len({r.entity.namespace for r in rendered_entities}),
                zoom_percent=state.zoom_percent,
            ),
            legend=self._legend(snapshot, colors),
            detail=self.detail(snapshot, state.selected_entity),
            loading=loading,
            error=error,
            can_refresh=can_refresh,
        )

    def detail(self, snapshot: SchemaSnapshot, entity_id: Optional[str]) -> Optional[EntityDetail]:
        """Detail panel of an entity, or ``None`` if nothing (known) is selected."""
        if entity_id is None:
            return None
        entity = snapshot.get_entity(entity_id)
        if entity is None:
            return None
        return EntityDetail(
            entity=entity,
            generalization_chain=snapshot.get_generalization_chain(entity_id),
            related_relationships=snapshot.get_related_relationships(entity_id),
        )

    # ── Helpers ──────────────────────────────────────────────────

    def _namespace_colors(self, snapshot: SchemaSnapshot) -> Dict[str, str]:
        return {name: self._config.namespace_color(index)
                for index, name in enumerate(snapshot.namespace_names)}

    @staticmethod
    def _namespace_options(snapshot: SchemaSnapshot, state: ViewerState,
                           colors: Dict[str, str]) -> List[NamespaceOption]:
        return [
            NamespaceOption(
                name=ns.name,
                selected=ns.name in state.selected_namespaces,
                from_marketplace=ns.from_marketplace,
                is_system=ns.is_system,
                color=colors[ns.name],
            )
            for ns in snapshot.namespaces
        ]

    def _legend(self, snapshot: SchemaSnapshot, colors: Dict[str, str]) -> Legend:
        limit = self._config.legend_namespace_limit
        names = snapshot.namespace_names
        return Legend(
            relationship_kinds=[
                LegendEntry("Same namespace association", self._config.same_namespace_color),
                LegendEntry("Cross-namespace association", self._config.cross_namespace_color),
                LegendEntry("Reference Set (N:M)", self._config.same_namespace_color, dashed=True),
            ],
            namespaces=[LegendEntry(name, colors[name]) for name in names[:limit]],
            hidden_namespace_count=max(0, len(names) - limit),
        )
