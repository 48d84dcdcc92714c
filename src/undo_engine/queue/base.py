"""Contract shared by every change-queue backend.

A change queue stores reversible changes and a pointer to the current
position. Changes behind the pointer can be undone, the change ahead of it on
the active path can be redone. Backends decide how history is shaped (linear
or branching); the coordinator only talks to ``ChangeQueue``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, Tuple, TypeVar

from undo_engine.errors import EmptyHistoryError, QueueClosedError
from undo_engine.observable import ObservableFlag, SuspendableFlag

C = TypeVar("C")


@dataclass(eq=False, slots=True)
class ChangeRecord:
    """A stored change. ``valid`` drops to ``False`` once the record is pruned."""

    change: Any
    valid: bool = True


class QueuePosition:
    """Opaque handle on the document state reached after ``record``."""

    __slots__ = ("_queue", "_record")

    def __init__(self, queue: "ChangeQueue[Any]", record: ChangeRecord) -> None:
        self._queue = queue
        self._record = record

    @property
    def queue(self) -> "ChangeQueue[Any]":
        return self._queue

    @property
    def record(self) -> ChangeRecord:
        return self._record

    def is_valid(self) -> bool:
        return self._record.valid and not self._queue.closed

    def mark(self) -> None:
        self._queue.mark(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueuePosition):
            return NotImplemented
        return self._queue is other._queue and self._record is other._record

    def __hash__(self) -> int:
        return hash((id(self._queue), id(self._record)))


class ChangeQueue(Generic[C]):
    """Base class for history stores.

    Subclasses implement navigation and push operations and call
    ``_refresh()`` after every mutation so the observable flags track the
    pointer. A new queue starts at its marked position.
    """

    def __init__(self, *, logger_name: str | None = None) -> None:
        self.undo_available = ObservableFlag(False)
        self.redo_available = ObservableFlag(False)
        self.at_marked_position = ObservableFlag(True)
        self.performing_action = SuspendableFlag()
        self._logger_name = logger_name
        self._marked: Optional[ChangeRecord] = None
        self._closed = False

    def _current(self) -> ChangeRecord:  # pragma: no cover - abstract override
        raise NotImplementedError

    def _release(self) -> None:  # pragma: no cover - abstract override
        raise NotImplementedError

    def has_prev(self) -> bool:  # pragma: no cover - abstract override
        raise NotImplementedError

    def prev(self) -> C:  # pragma: no cover - abstract override
        """Return the change right behind the current position."""

        raise NotImplementedError

    def has_next(self) -> bool:  # pragma: no cover - abstract override
        raise NotImplementedError

    def next(self) -> C:  # pragma: no cover - abstract override
        """Return the change right ahead of the current position."""

        raise NotImplementedError

    def update_graph_with_undo(self, change: C) -> None:  # pragma: no cover
        """Step back one change; ``change`` is the inverse that was applied."""

        raise NotImplementedError

    def update_graph_with_redo(self, change: C) -> None:  # pragma: no cover
        """Step forward one change; ``change`` must equal ``next()``."""

        raise NotImplementedError

    def push(self, change: C) -> None:  # pragma: no cover - abstract override
        raise NotImplementedError

    def push_merged(self, combined: C) -> None:  # pragma: no cover
        """Replace the change behind the current position with ``combined``."""

        raise NotImplementedError

    def push_unmerged(self, merge_base: C, change: C) -> None:
        """Push ``change`` after a declined merge against ``merge_base``."""

        del merge_base
        self.push(change)

    def forget_history(self) -> None:  # pragma: no cover - abstract override
        raise NotImplementedError

    def history(self) -> Tuple[C, ...]:  # pragma: no cover - abstract override
        """Undoable changes from the oldest up to the current position."""

        raise NotImplementedError

    @property
    def closed(self) -> bool:
        return self._closed

    def is_undo_available(self) -> bool:
        return self.has_prev()

    def is_redo_available(self) -> bool:
        return self.has_next()

    def is_performing_action(self) -> bool:
        return self.performing_action.value

    def is_at_marked_position(self) -> bool:
        self._ensure_open()
        return self._at_mark()

    def get_current_position(self) -> QueuePosition:
        self._ensure_open()
        return QueuePosition(self, self._current())

    def mark(self, position: QueuePosition) -> None:
        """Record ``position`` as the clean state; invalid positions are ignored."""

        self._ensure_open()
        if position.queue is not self:
            raise ValueError("Position belongs to a different queue")
        if not position.is_valid():
            return
        self._marked = position.record
        self._refresh()

    def close(self) -> None:
        if self._closed:
            return
        self._release()
        self._marked = None
        self._closed = True
        for flag in (
            self.undo_available,
            self.redo_available,
            self.at_marked_position,
            self.performing_action,
        ):
            flag.release()

    def _at_mark(self) -> bool:
        marked = self._marked
        return marked is not None and marked.valid and marked is self._current()

    def _refresh(self) -> None:
        self.undo_available.set(self.has_prev())
        self.redo_available.set(self.has_next())
        self.at_marked_position.set(self._at_mark())

    def _ensure_open(self) -> None:
        if self._closed:
            raise QueueClosedError(f"{type(self).__name__} is closed")

    def _require_prev(self) -> None:
        if not self.has_prev():
            raise EmptyHistoryError(
                "No change behind the current position", direction="undo"
            )

    def _require_next(self) -> None:
        if not self.has_next():
            raise EmptyHistoryError(
                "No change ahead of the current position", direction="redo"
            )


__all__ = [
    "ChangeQueue",
    "ChangeRecord",
    "QueuePosition",
]
