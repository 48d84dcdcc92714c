from __future__ import annotations

import pytest

from undo_engine.errors import EmptyHistoryError
from undo_engine.queue import LinearChangeQueue


def make_queue(*changes: str, capacity: int | None = None) -> LinearChangeQueue[str]:
    queue: LinearChangeQueue[str] = LinearChangeQueue(capacity=capacity)
    for change in changes:
        queue.push(change)
    return queue


def test_push_after_undo_discards_redo_side() -> None:
    queue = make_queue("a", "b")
    queue.update_graph_with_undo("~b")
    dropped = queue.get_current_position()
    queue.update_graph_with_redo("b")
    redo_side = queue.get_current_position()
    queue.update_graph_with_undo("~b")

    queue.push("c")

    assert queue.history() == ("a", "c")
    assert queue.is_redo_available() is False
    assert redo_side.is_valid() is False
    assert dropped.is_valid() is True


def test_capacity_drops_oldest_changes() -> None:
    queue = make_queue(capacity=2)
    initial = queue.get_current_position()

    for change in ("a", "b", "c"):
        queue.push(change)

    assert queue.history() == ("b", "c")
    assert initial.is_valid() is False
    assert queue.is_at_marked_position() is False


def test_zero_capacity_never_offers_undo() -> None:
    queue = make_queue("a", "b", capacity=0)

    assert queue.is_undo_available() is False
    with pytest.raises(EmptyHistoryError):
        queue.prev()


def test_negative_capacity_rejected() -> None:
    with pytest.raises(ValueError):
        LinearChangeQueue(capacity=-1)


def test_push_merged_replaces_top() -> None:
    queue = make_queue("a", "b")
    stale = queue.get_current_position()

    queue.push_merged("bc")

    assert queue.history() == ("a", "bc")
    assert stale.is_valid() is False


def test_forget_history_keeps_redo_side() -> None:
    queue = make_queue("a", "b", "c")
    queue.update_graph_with_undo("~c")

    queue.forget_history()

    assert queue.has_prev() is False
    assert queue.next() == "c"


def test_mark_round_trip() -> None:
    queue = make_queue("a")
    queue.mark(queue.get_current_position())
    queue.update_graph_with_undo("~a")

    assert queue.is_at_marked_position() is False

    queue.update_graph_with_redo("a")

    assert queue.is_at_marked_position() is True
