# viewer_services/layout_service.py
"""
    LayoutService — force-directed placement of entities on the canvas.

    Algorithm
    ─────────
    1. Group entities by namespace (first-seen order).
    2. Coarse placement: namespaces on a roughly square grid over the canvas,
       each namespace's entities on a roughly square sub-grid inside its cell.
       Nothing overlaps initially and each namespace starts as a cluster.
    3. Relaxation: a fixed number of passes of a spring/repulsion model.
       Every unordered pair repels with ``repulsion / d²`` (d floored at
       ``min_distance``); every resolvable relationship pulls its endpoints
       together with ``attraction * (dx, dy)``. The net force is applied
       scaled by ``damping`` and positions are clamped inside the canvas
       margins after every pass.

    The result depends only on the input order; no randomness is involved.

    Complexity is O(iterations × N²) because of the pairwise repulsion. That
    is fine for a few hundred entities; larger schemas would need a spatial
    index (Barnes-Hut quad-tree) behind the same ``compute_layout`` contract.
"""
import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

from schema_api.models.entity import Entity
from schema_api.models.position import Position
from schema_api.models.relationship import Relationship
from schema_api.models.snapshot import SchemaSnapshot, build_reference_index, group_by_namespace

from viewer_platform.config import LayoutConfig

logger = logging.getLogger(__name__)


def compute_layout(entities: Sequence[Entity],
                   relationships: Sequence[Relationship],
                   config: Optional[LayoutConfig] = None) -> Dict[str, Position]:
    """
    Compute canvas positions for the given entities.

    Args:
        entities:      Entities to place; their order seeds the layout.
        relationships: Relationships pulling connected entities together.
                       Endpoints may be ids or qualified names; endpoints
                       that do not resolve contribute no force.
        config:        Layout tuning (defaults to ``LayoutConfig()``).

    Returns:
        Mapping of entity id to final position.
    """
    config = config or LayoutConfig()
    entities = list(entities)
    if not entities:
        return {}

    ids = [e.entity_id for e in entities]
    xs, ys = _initial_grid(entities, config)
    springs = _resolve_springs(entities, relationships)

    count = len(ids)
    for _ in range(config.iterations):
        fx = [0.0] * count
        fy = [0.0] * count

        # Repulsion between all nodes
        for i in range(count):
            for j in range(i + 1, count):
                dx = xs[j] - xs[i]
                dy = ys[j] - ys[i]
                distance = max(math.sqrt(dx * dx + dy * dy), config.min_distance)
                force = config.repulsion_strength / (distance * distance)
                px = dx / distance * force
                py = dy / distance * force
                fx[i] -= px
                fy[i] -= py
                fx[j] += px
                fy[j] += py

        # Attraction along relationships
        for i, j in springs:
            px = (xs[j] - xs[i]) * config.attraction_strength
            py = (ys[j] - ys[i]) * config.attraction_strength
            fx[i] += px
            fy[i] += py
            fx[j] -= px
            fy[j] -= py

        for k in range(count):
            xs[k] = _clamp(xs[k] + fx[k] * config.damping,
                           config.margin_x, config.width - config.margin_x)
            ys[k] = _clamp(ys[k] + fy[k] * config.damping,
                           config.margin_y, config.height - config.margin_y)

    logger.debug("Layout computed for %d entities, %d springs, %d iterations",
                 count, len(springs), config.iterations)
    return {entity_id: Position(xs[k], ys[k]) for k, entity_id in enumerate(ids)}


def _initial_grid(entities: List[Entity], config: LayoutConfig) -> Tuple[List[float], List[float]]:
    """Namespace grid with an entity sub-grid per cell, in input order."""
    groups = group_by_namespace(entities)
    namespaces = list(groups.keys())

    per_row = math.ceil(math.sqrt(len(namespaces)))
    cell_width = config.width / per_row
    cell_height = config.height / math.ceil(len(namespaces) / per_row)

    placed: Dict[str, Tuple[float, float]] = {}
    for ns_index, namespace in enumerate(namespaces):
        ns_col = ns_index % per_row
        ns_row = ns_index // per_row
        members = groups[namespace]

        cols = math.ceil(math.sqrt(len(members)))
        rows = math.ceil(len(members) / cols)
        step_x = cell_width / (cols + 1)
        step_y = cell_height / (rows + 1)

        for index, entity in enumerate(members):
            col = index % cols
            row = index // cols
            placed[entity.entity_id] = (
                ns_col * cell_width + (col + 1) * step_x,
                ns_row * cell_height + (row + 1) * step_y,
            )

    xs = [placed[e.entity_id][0] for e in entities]
    ys = [placed[e.entity_id][1] for e in entities]
    return xs, ys


def _resolve_springs(entities: List[Entity],
                     relationships: Sequence[Relationship]) -> List[Tuple[int, int]]:
    """Index pairs of relationships whose both endpoints resolve."""
    index = build_reference_index(entities)
    slot = {e.entity_id: k for k, e in enumerate(entities)}

    springs = []
    for rel in relationships:
        source_id = index.get(rel.source)
        target_id = index.get(rel.target)
        if source_id is None or target_id is None:
            continue
        springs.append((slot[source_id], slot[target_id]))
    return springs


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class LayoutService:
    """
    Layout Engine bound to a ``LayoutConfig``.

    Usage:
        service = LayoutService(LayoutConfig(iterations=100))
        positions = service.layout(snapshot)
    """

    def __init__(self, config: Optional[LayoutConfig] = None):
        self._config = config or LayoutConfig()

    @property
    def config(self) -> LayoutConfig:
        return self._config

    @config.setter
    def config(self, value: LayoutConfig) -> None:
        self._config = value

    def compute(self, entities: Sequence[Entity],
                relationships: Sequence[Relationship]) -> Dict[str, Position]:
        return compute_layout(entities, relationships, self._config)

    def layout(self, snapshot: SchemaSnapshot) -> Dict[str, Position]:
        """Layout of every entity in a snapshot."""
        return compute_layout(snapshot.entities, snapshot.relationships, self._config)
