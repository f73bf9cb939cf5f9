# tests/core_test/test_layout_service.py
"""
Force-directed layout tests — determinism, canvas bounds, isolation and
the contract of the initial grid.
"""
import pytest

from schema_api.models.entity import Entity
from schema_api.models.position import Position
from schema_api.models.relationship import Relationship

from viewer_platform.config import LayoutConfig
from viewer_services.layout_service import LayoutService, compute_layout


def _entities(count, namespaces=("A",)):
    return [Entity(str(i), f"E{i}", namespaces[i % len(namespaces)]) for i in range(count)]


def _within_bounds(positions, config):
    return all(
        config.margin_x <= p.x <= config.width - config.margin_x
        and config.margin_y <= p.y <= config.height - config.margin_y
        for p in positions.values()
    )


class TestLayoutContract:

    def test_empty_input(self):
        assert compute_layout([], []) == {}

    def test_every_entity_placed(self, stub_snapshot):
        positions = compute_layout(stub_snapshot.entities, stub_snapshot.relationships)
        assert set(positions) == {"1", "2", "3", "10", "20", "21"}
        assert all(isinstance(p, Position) for p in positions.values())

    def test_deterministic(self, stub_snapshot):
        first = compute_layout(stub_snapshot.entities, stub_snapshot.relationships)
        second = compute_layout(stub_snapshot.entities, stub_snapshot.relationships)
        assert first == second

    def test_bounds_for_fifty_entities_in_one_namespace(self):
        config = LayoutConfig()
        positions = compute_layout(_entities(50), [])
        assert len(positions) == 50
        assert _within_bounds(positions, config)

    def test_bounds_on_custom_canvas(self):
        config = LayoutConfig(width=400, height=300, margin_x=20, margin_y=10, iterations=30)
        entities = _entities(30, namespaces=("A", "B", "C"))
        rels = [Relationship(f"r{i}", "n", str(i), str(i + 1)) for i in range(29)]
        positions = compute_layout(entities, rels, config)
        assert _within_bounds(positions, config)


class TestLayoutForces:

    def test_unconnected_entities_repel(self):
        # Zero iterations gives the grid; relaxation must only push them apart
        entities = [Entity("a", "A", "N"), Entity("b", "B", "N")]
        grid = compute_layout(entities, [], LayoutConfig(iterations=0))
        relaxed = compute_layout(entities, [], LayoutConfig(iterations=5))
        grid_gap = abs(grid["a"].x - grid["b"].x)
        relaxed_gap = abs(relaxed["a"].x - relaxed["b"].x)
        assert relaxed_gap > grid_gap

    def test_connected_pair_closer_than_unconnected(self):
        entities = [Entity("a", "A", "N1"), Entity("b", "B", "N2")]
        linked = [Relationship("r", "n", "a", "b")]
        free = compute_layout(entities, [])
        pulled = compute_layout(entities, linked)
        assert abs(pulled["a"].x - pulled["b"].x) < abs(free["a"].x - free["b"].x)

    def test_qualified_name_endpoints_pull(self):
        entities = [Entity("a", "A", "N1"), Entity("b", "B", "N2")]
        by_id = compute_layout(entities, [Relationship("r", "n", "a", "b")])
        by_name = compute_layout(entities, [Relationship("r", "n", "N1.A", "N2.B")])
        assert by_id == by_name

    def test_unresolvable_relationship_ignored(self):
        entities = [Entity("a", "A", "N1"), Entity("b", "B", "N2")]
        plain = compute_layout(entities, [])
        dangling = compute_layout(entities, [Relationship("r", "n", "a", "ghost")])
        assert plain == dangling

    def test_isolation_from_other_components(self):
        # Two entities without relationships: adding an unrelated connected
        # pair elsewhere moves them only through repulsion, never attraction
        lonely = [Entity("x", "X", "N1"), Entity("y", "Y", "N2")]
        pair = [Entity("p", "P", "N3"), Entity("q", "Q", "N4")]
        rel = [Relationship("r", "n", "p", "q")]
        with_spring = compute_layout(lonely + pair, rel)
        without_spring = compute_layout(lonely + pair, [])
        assert with_spring["x"] != Position(0, 0)
        # The spring only acts on p and q on the first pass
        first_with = compute_layout(lonely + pair, rel, LayoutConfig(iterations=1))
        first_without = compute_layout(lonely + pair, [], LayoutConfig(iterations=1))
        assert first_with["x"] == first_without["x"]
        assert first_with["y"] == first_without["y"]
        assert first_with["p"] != first_without["p"]
        assert set(with_spring) == set(without_spring)

    def test_coincident_entities_do_not_explode(self):
        # Distance floor keeps the force finite; clamping keeps them on canvas
        config = LayoutConfig(width=200.0, height=100.0, margin_x=100.0, margin_y=50.0)
        positions = compute_layout(_entities(3), [], config)
        assert all(p == Position(100.0, 50.0) for p in positions.values())


class TestInitialGrid:

    def test_single_entity_centred_in_canvas(self):
        positions = compute_layout([Entity("a", "A", "N")], [], LayoutConfig(iterations=0))
        assert positions["a"] == Position(600.0, 400.0)

    def test_namespaces_start_in_separate_cells(self):
        entities = [Entity("a", "A", "N1"), Entity("b", "B", "N2"),
                    Entity("c", "C", "N3"), Entity("d", "D", "N4")]
        positions = compute_layout(entities, [], LayoutConfig(iterations=0))
        # 4 namespaces → 2×2 grid of 600×400 cells, one entity centred per cell
        assert positions["a"] == Position(300.0, 200.0)
        assert positions["b"] == Position(900.0, 200.0)
        assert positions["c"] == Position(300.0, 600.0)
        assert positions["d"] == Position(900.0, 600.0)


class TestLayoutService:

    def test_layout_of_snapshot(self, stub_snapshot):
        service = LayoutService()
        assert service.layout(stub_snapshot) == compute_layout(
            stub_snapshot.entities, stub_snapshot.relationships)

    def test_config_swap(self, stub_snapshot):
        service = LayoutService()
        service.config = LayoutConfig(iterations=0)
        assert service.compute(stub_snapshot.entities, []) == compute_layout(
            stub_snapshot.entities, [], LayoutConfig(iterations=0))

    @pytest.mark.parametrize("kwargs", [
        dict(width=150.0),
        dict(height=90.0),
        dict(iterations=-1),
    ])
    def test_invalid_config(self, kwargs):
        with pytest.raises(ValueError):
            LayoutConfig(**kwargs)
