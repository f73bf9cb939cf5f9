# tests/core_test/test_viewer_session.py
"""
ViewerSession — fetch lifecycle, failure handling, gesture dispatch,
async fetch exclusion and the replayable event log.
"""
import asyncio

import pytest

from schema_api.models.entity import Entity
from schema_api.models.namespace import NamespaceInfo, NamespaceSchema
from schema_api.models.position import Position

from viewer_platform.config import PlatformConfig
from viewer_platform.events import (
    ClickEntity,
    PointerDownOnNode,
    PointerMove,
    PointerUp,
    Scroll,
    SnapshotLoaded,
    SnapshotRefreshed,
    ToggleNamespace,
    ZoomIn,
)
from viewer_platform.session import ViewerSession
from viewer_services.exceptions import RefreshInProgressError


# ═════════════════════════════════════════════════════════════════
#  Load
# ═════════════════════════════════════════════════════════════════

class TestLoad:

    def test_initial_state(self, session):
        assert not session.is_loaded
        assert session.snapshot is None
        assert session.error is None
        assert session.can_refresh
        assert session.view.entities == []

    def test_load(self, session):
        assert session.load() is True
        assert session.is_loaded
        assert session.snapshot.get_number_of_entities() == 6
        assert set(session.state.layout) == {"1", "2", "3", "10", "20", "21"}
        assert session.state.selected_namespaces == frozenset({"App"})
        assert session.view.entity_ids == ["1", "2", "3"]
        assert not session.loading

    def test_load_failure(self, session, stub_source):
        stub_source.fail_on = "*"
        assert session.load() is False
        assert session.error.startswith("Failed to load data: ")
        assert "host unavailable" in session.error
        assert session.snapshot is None
        assert session.can_refresh

    def test_schema_failure_aborts_whole_fetch(self, session, stub_source):
        stub_source.fail_on = "System"
        assert session.load() is False
        assert "timed out reading System" in session.error
        assert session.snapshot is None

    def test_successful_load_clears_error(self, session, stub_source):
        stub_source.fail_on = "*"
        session.load()
        stub_source.fail_on = None
        assert session.load() is True
        assert session.error is None

    def test_to_dict(self, loaded_session):
        data = loaded_session.to_dict()
        assert data['loaded'] is True
        assert data['source'] == "stub"
        assert (data['entities'], data['relationships'], data['namespaces']) == (6, 5, 3)
        assert data['error'] is None


# ═════════════════════════════════════════════════════════════════
#  Refresh
# ═════════════════════════════════════════════════════════════════

class TestRefresh:

    def test_refresh_before_load_loads(self, session):
        assert session.refresh() is True
        assert session.is_loaded

    def test_refresh_keeps_view(self, loaded_session):
        loaded_session.dispatch_all([ZoomIn(), ToggleNamespace("Lib"), ClickEntity("1")])
        assert loaded_session.refresh() is True
        state = loaded_session.state
        assert state.zoom == pytest.approx(1.2)
        assert state.selected_namespaces == frozenset({"App", "Lib"})
        assert state.selected_entity == "1"

    def test_refresh_sees_host_changes(self, loaded_session, stub_source):
        stub_source.schemas["Lib"] = NamespaceSchema(entities=[
            Entity("10", "Product", "Lib"), Entity("11", "Category", "Lib")])
        loaded_session.refresh()
        assert loaded_session.snapshot.has_entity("11")
        assert "11" in loaded_session.state.layout

    def test_failed_refresh_keeps_previous_everything(self, loaded_session, stub_source):
        loaded_session.dispatch(ZoomIn())
        before_snapshot = loaded_session.snapshot
        before_state = loaded_session.state

        stub_source.fail_on = "*"
        assert loaded_session.refresh() is False
        assert loaded_session.error.startswith("Failed to refresh data: ")
        assert loaded_session.snapshot is before_snapshot
        assert loaded_session.state is before_state
        assert loaded_session.view.error == loaded_session.error
        assert loaded_session.view.entity_ids == ["1", "2", "3"]

    def test_refresh_drops_vanished_override(self, loaded_session, stub_source):
        start = loaded_session.position_of("3")
        loaded_session.dispatch_all([PointerDownOnNode("3", start),
                                     PointerMove(Position(10, 10)), PointerUp()])
        stub_source.schemas["App"] = NamespaceSchema(entities=[Entity("1", "Customer", "App")])
        loaded_session.refresh()
        assert "3" not in loaded_session.state.position_overrides


# ═════════════════════════════════════════════════════════════════
#  Gestures
# ═════════════════════════════════════════════════════════════════

class TestDispatch:

    def test_gestures_before_load_ignored(self, session):
        state = session.dispatch(ZoomIn())
        assert state.zoom == 1.0
        assert session.event_log == []

    def test_dispatch_returns_new_state(self, loaded_session):
        assert loaded_session.dispatch(Scroll(-1)).zoom == pytest.approx(1.1)

    def test_drag_reflected_in_view(self, loaded_session):
        start = loaded_session.position_of("2")
        loaded_session.dispatch_all([PointerDownOnNode("2", start),
                                     PointerMove(Position(11, 22)), PointerUp()])
        assert loaded_session.view.get_rendered_entity("2").position == Position(11, 22)

    def test_lifecycle_event_rejected(self, loaded_session, stub_snapshot):
        before = loaded_session.state
        with pytest.raises(TypeError, match="not a gesture"):
            loaded_session.dispatch(SnapshotLoaded(stub_snapshot, {}))
        with pytest.raises(TypeError):
            loaded_session.dispatch(SnapshotRefreshed(stub_snapshot, {}))
        assert loaded_session.state is before

    def test_loading_disables_refresh(self, session):
        session._loading = True
        assert not session.can_refresh
        assert session.view.loading
        with pytest.raises(RefreshInProgressError):
            session.load()


# ═════════════════════════════════════════════════════════════════
#  Async fetch
# ═════════════════════════════════════════════════════════════════

class TestAsyncFetch:

    def test_load_async(self, session):
        assert asyncio.run(session.load_async()) is True
        assert session.is_loaded
        assert not session.loading

    def test_overlapping_fetch_refused(self, session, stub_source):
        async def both():
            return await asyncio.gather(session.load_async(), session.refresh_async(),
                                        return_exceptions=True)

        first, second = asyncio.run(both())
        assert first is True
        assert isinstance(second, RefreshInProgressError)
        assert stub_source.calls == 1
        assert session.can_refresh

    def test_async_refresh_failure(self, loaded_session, stub_source):
        stub_source.fail_on = "App"
        assert asyncio.run(loaded_session.refresh_async()) is False
        assert "timed out reading App" in loaded_session.error
        assert loaded_session.is_loaded


# ═════════════════════════════════════════════════════════════════
#  Event log
# ═════════════════════════════════════════════════════════════════

class TestEventLog:

    def test_replay_reproduces_state(self, loaded_session):
        start = loaded_session.position_of("1")
        loaded_session.dispatch_all([ZoomIn(), ClickEntity("2"), PointerDownOnNode("1", start),
                                     PointerMove(Position(3, 4)), PointerUp()])
        loaded_session.refresh()
        assert loaded_session.replay() == loaded_session.state

    def test_log_is_bounded(self, stub_source):
        session = ViewerSession(stub_source, config=PlatformConfig(max_event_log=3))
        session.load()
        session.dispatch_all([ZoomIn(), ZoomIn(), ZoomIn(), ZoomIn()])
        assert len(session.event_log) == 3
        assert session.replay() == session.state

    def test_disabled_log(self, stub_source):
        session = ViewerSession(stub_source, config=PlatformConfig(max_event_log=0))
        session.load()
        session.dispatch(ZoomIn())
        assert session.event_log == []
        assert session.replay() == session.state


def test_namespace_added_by_host_stays_hidden(loaded_session, stub_source):
    stub_source.namespaces.append(NamespaceInfo("Extra"))
    stub_source.schemas["Extra"] = NamespaceSchema(entities=[Entity("50", "Thing", "Extra")])
    loaded_session.refresh()
    assert "Extra" in loaded_session.state.namespace_names
    assert "50" not in loaded_session.view.entity_ids
