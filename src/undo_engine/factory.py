"""Shortcuts for building undo managers over the bundled queues."""

from __future__ import annotations

from typing import Optional

from undo_engine.manager import Apply, ChangeSource, Invert, Merge, UndoManager
from undo_engine.queue import LinearChangeQueue, NonlinearChangeQueue
from undo_engine.queue.base import C


def never_merge(prev: object, change: object) -> None:
    del prev, change
    return None


def _identity(change: C) -> C:
    return change


def _ignore(change: object) -> None:
    del change


def unlimited_history_undo_manager(
    change_source: ChangeSource[C],
    invert: Invert[C],
    apply: Apply[C],
    merge: Optional[Merge[C]] = None,
    *,
    logger_name: str | None = None,
) -> UndoManager[C]:
    """Linear history that keeps every change."""

    return UndoManager(
        LinearChangeQueue(logger_name=logger_name),
        invert,
        apply,
        merge or never_merge,
        change_source,
        logger_name=logger_name,
    )


def fixed_size_history_undo_manager(
    change_source: ChangeSource[C],
    invert: Invert[C],
    apply: Apply[C],
    capacity: int,
    merge: Optional[Merge[C]] = None,
    *,
    logger_name: str | None = None,
) -> UndoManager[C]:
    """Linear history that keeps at most ``capacity`` undoable changes."""

    return UndoManager(
        LinearChangeQueue(capacity=capacity, logger_name=logger_name),
        invert,
        apply,
        merge or never_merge,
        change_source,
        logger_name=logger_name,
    )


def zero_history_undo_manager(
    change_source: ChangeSource[C], *, logger_name: str | None = None
) -> UndoManager[C]:
    """Manager that observes edits but never offers undo.

    Useful where a host expects an undo manager (for the marked-position
    tracking, say) but history should not be kept.
    """

    return UndoManager(
        LinearChangeQueue(capacity=0, logger_name=logger_name),
        _identity,
        _ignore,
        never_merge,
        change_source,
        logger_name=logger_name,
    )


def nonlinear_undo_manager(
    change_source: ChangeSource[C],
    invert: Invert[C],
    apply: Apply[C],
    merge: Optional[Merge[C]] = None,
    *,
    logger_name: str | None = None,
) -> UndoManager[C]:
    """Branching history; abandoned redo paths stay reachable as dormant branches."""

    return UndoManager(
        NonlinearChangeQueue(logger_name=logger_name),
        invert,
        apply,
        merge or never_merge,
        change_source,
        logger_name=logger_name,
    )


__all__ = [
    "never_merge",
    "unlimited_history_undo_manager",
    "fixed_size_history_undo_manager",
    "zero_history_undo_manager",
    "nonlinear_undo_manager",
]
