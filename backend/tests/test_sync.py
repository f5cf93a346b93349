"""
Helios Intel - Collection Sync Tests
Views re-list their collection wholesale on every broadcast. Cross-writer
ordering is last-write-wins at collection granularity.
"""
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from schemas.reports import ReportData  # noqa: E402
from sync import CollectionView  # noqa: E402

pytestmark = pytest.mark.timeout(10)


def _report(title):
    return ReportData(title=title, content="body")


class TestCollectionView:
    """Tests for CollectionView refresh behaviour."""

    def test_initial_snapshot(self, reports, bus):
        saved = reports.add(_report("Existing"))
        view = CollectionView(reports, bus)
        assert [r.id for r in view] == [saved.id]
        assert len(view) == 1
        assert view.refresh_count == 0

    def test_refreshes_on_other_writer(self, reports, storage, bus):
        from stores import ReportStore
        view = CollectionView(reports, bus)
        other_component = ReportStore(storage, bus)
        saved = other_component.add(_report("From elsewhere"))
        assert [r.id for r in view.items] == [saved.id]
        assert view.refresh_count == 1

    def test_on_change_receives_items(self, reports, bus):
        received = []
        CollectionView(reports, bus, on_change=received.append)
        reports.add(_report("One"))
        reports.add(_report("Two"))
        assert [[r.title for r in items] for items in received] == [["One"], ["Two", "One"]]

    def test_ignores_other_collections(self, reports, notifications, bus):
        view = CollectionView(reports, bus)
        notifications.add({
            "type": "SHARE",
            "actor": {"id": "user-1", "name": "Alex Miller"},
            "message": "m",
            "link_to": {"module": "Prospect Book"},
        })
        assert view.refresh_count == 0

    def test_close_stops_refresh(self, reports, bus):
        view = CollectionView(reports, bus)
        view.close()
        view.close()
        reports.add(_report("After close"))
        assert view.closed
        assert view.items == []
        assert bus.listener_count("reports-updated") == 0

    def test_context_manager_closes(self, reports, bus):
        with CollectionView(reports, bus) as view:
            reports.add(_report("Inside"))
            assert len(view) == 1
        assert view.closed

    def test_watchlist_view_sees_alerts(self, watchlist, bus):
        item = watchlist.add({"name": "Acme Health"})
        view = CollectionView(watchlist, bus)
        watchlist.add_alert({
            "watchlist_item_id": item.id,
            "watchlist_item_name": item.name,
            "title": "News",
            "summary": "s",
        })
        assert view.refresh_count == 1

    def test_writer_sees_own_write_before_broadcast(self, reports, bus):
        seen_during_emit = []
        bus.on_every("reports-updated", lambda name: seen_during_emit.append(reports.count()))
        reports.add(_report("Mine"))
        assert seen_during_emit == [1]
        assert reports.count() == 1


class TestLastWriteWins:
    """Two writers holding snapshots of the same collection race."""

    def test_later_full_write_overwrites_earlier(self, storage, bus):
        from stores import ReportStore
        writer_a = ReportStore(storage, bus)
        writer_b = ReportStore(storage, bus)

        snapshot_a = writer_a.list()              # A reads: []
        lost = writer_b.add(_report("From B"))     # B writes [B]
        writer_a._persist(snapshot_a + [writer_a.model.model_validate({
            "id": "a-1", "savedAt": "2026-01-01T00:00:00+00:00",
            "title": "From A", "content": "body",
        })])                                       # A writes its stale snapshot

        titles = [r.title for r in writer_b.list()]
        assert titles == ["From A"]
        assert writer_b.get(lost.id) is None

    def test_sequential_writers_do_not_lose_updates(self, storage, bus):
        from stores import ReportStore
        writer_a = ReportStore(storage, bus)
        writer_b = ReportStore(storage, bus)
        writer_a.add(_report("A"))
        writer_b.add(_report("B"))
        assert [r.title for r in writer_a.list()] == ["B", "A"]


class TestWorkspaceWatch:

    def test_watch_returns_live_view(self, workspace):
        with workspace.watch(workspace.reports) as view:
            workspace.reports.add(_report("Live"))
            assert [r.title for r in view.items] == ["Live"]
