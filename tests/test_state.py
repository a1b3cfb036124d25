"""Tests for the UI state and its intents."""

from pathlib import Path

import pytest

from nmclean.models import DeletionBatch, DeletionOutcome, ScanFinished, TargetFound

from nmclean.state import CleanerState

ROOT = Path("/proj")


def _found(rel, size):
    return TargetFound(path=str(ROOT / rel), size_bytes=size)


@pytest.fixture
def state():
    s = CleanerState(ROOT, "node_modules")
    s.on_target_found(_found("a/node_modules", 100))
    s.on_target_found(_found("a/b/node_modules", 50))
    s.on_scan_finished(ScanFinished(found_count=2, total_bytes=150))
    return s


class TestScanEvents:
    def test_discovery_rebuilds_rows(self):
        s = CleanerState(ROOT, "node_modules")
        assert s.scanning
        assert s.flat == []

        s.on_target_found(_found("a/node_modules", 100))
        assert [n.name for n in s.flat] == ["a", "node_modules"]

    def test_scan_finished_clears_flag(self, state):
        assert not state.scanning
        assert not state.busy

    def test_discovery_order_does_not_change_rows(self):
        first = CleanerState(ROOT, "node_modules")
        second = CleanerState(ROOT, "node_modules")
        events = [_found("a/node_modules", 10), _found("b/node_modules", 30), _found("a/c/node_modules", 5)]

        for event in events:
            first.on_target_found(event)
        for event in reversed(events):
            second.on_target_found(event)

        assert [n.path for n in first.flat] == [n.path for n in second.flat]


class TestNavigation:
    def test_move_within_bounds(self, state):
        state.move_up()
        assert state.cursor == 0

        for _ in range(10):
            state.move_down()
        assert state.cursor == len(state.flat) - 1

    def test_current(self, state):
        assert state.current().name == "a"
        state.move_down()
        assert state.current().path == str(ROOT / "a" / "node_modules")

    def test_current_when_empty(self):
        assert CleanerState(ROOT, "node_modules").current() is None

    def test_rebuild_clamps_cursor(self, state):
        state.cursor = 42
        state.rebuild()
        assert state.cursor == len(state.flat) - 1


class TestIntents:
    def test_toggle_select_at_cursor(self, state):
        assert state.toggle_select()
        assert all(n.selected for n in state.flat)

    def test_intents_ignored_while_scanning(self):
        s = CleanerState(ROOT, "node_modules")
        s.on_target_found(_found("a/node_modules", 100))

        assert not s.toggle_select()
        assert not s.toggle_all()
        assert not s.toggle_expand()
        assert s.begin_deletion() == []
        assert not any(n.selected for n in s.flat)

    def test_toggle_expand_collapses_rows(self, state):
        assert state.toggle_expand()
        assert [n.name for n in state.flat] == ["a"]

        assert state.toggle_expand()
        assert len(state.flat) == 4

    def test_toggle_expand_needs_children(self, state):
        state.move_down()
        assert not state.toggle_expand()

    def test_toggle_all(self, state):
        assert state.toggle_all()
        assert all(n.selected for n in state.flat)
        state.toggle_all()
        assert not any(n.selected for n in state.flat)

    def test_toggle_select_on_deleted_node(self, state):
        state.move_down()
        state.tree.mark_deleted(state.current())
        assert not state.toggle_select()


class TestStats:
    def test_totals(self, state):
        stats = state.stats()
        assert stats.visible_count == 4
        assert stats.selected_count == 0
        assert stats.total_bytes == 150

    def test_selection_counts_only_targets(self, state):
        state.toggle_select()
        stats = state.stats()
        assert stats.selected_count == 2
        assert stats.selected_bytes == 150

    def test_deleted_excluded_but_still_visible(self, state):
        nm = state.tree.find(ROOT / "a" / "node_modules")
        state.tree.mark_deleted(nm)
        state.rebuild()

        stats = state.stats()
        assert stats.visible_count == 4
        assert stats.total_bytes == 50
        assert state.flat[1] is nm


class TestDeletion:
    def test_begin_deletion_marks_busy(self, state):
        state.toggle_select()
        paths = state.begin_deletion()

        assert paths == [str(ROOT / "a" / "node_modules"), str(ROOT / "a" / "b" / "node_modules")]
        assert state.deleting
        assert state.begin_deletion() == []

    def test_nothing_selected(self, state):
        assert state.begin_deletion() == []
        assert not state.deleting

    def test_finish_applies_outcomes(self, state):
        state.toggle_select()
        paths = state.begin_deletion()

        batch = DeletionBatch(
            outcomes=[
                DeletionOutcome(path=paths[0], bytes_freed=100),
                DeletionOutcome(path=paths[1], success=False, error="Permission denied: x"),
            ]
        )
        state.on_deletion_finished(batch)

        assert not state.deleting
        assert state.last_batch is batch
        assert state.tree.find(paths[0]).deleted
        failed = state.tree.find(paths[1])
        assert failed.selected
        assert state.failed_nodes() == [failed]

        stats = state.stats()
        assert stats.selected_count == 1
        assert stats.total_bytes == 50
