"""Linear undo/redo history, optionally bounded."""

from __future__ import annotations

from typing import List, Optional, Tuple

from undo_engine.errors import UnexpectedChangeError
from undo_engine.runtime import telemetry

from .base import C, ChangeQueue, ChangeRecord


class LinearChangeQueue(ChangeQueue[C]):
    """Flat history: a new edit after an undo discards the redo side.

    ``_records[0]`` stands for the oldest reachable document state and holds no
    undoable change; ``_records[i]`` for ``i > 0`` holds the change that leads
    to state ``i``. With ``capacity`` set, at most that many changes stay
    undoable and older ones are dropped as new ones arrive.
    """

    def __init__(
        self, *, capacity: Optional[int] = None, logger_name: str | None = None
    ) -> None:
        if capacity is not None and capacity < 0:
            raise ValueError("capacity cannot be negative")
        super().__init__(logger_name=logger_name)
        self.capacity = capacity
        self._records: List[ChangeRecord] = [ChangeRecord(change=None)]
        self._index = 0
        self._marked = self._records[0]
        self._refresh()

    def _current(self) -> ChangeRecord:
        return self._records[self._index]

    def _release(self) -> None:
        for record in self._records:
            record.valid = False
        self._records = [self._records[self._index]]
        self._index = 0

    def has_prev(self) -> bool:
        self._ensure_open()
        return self._index > 0

    def prev(self) -> C:
        self._require_prev()
        return self._records[self._index].change

    def has_next(self) -> bool:
        self._ensure_open()
        return self._index < len(self._records) - 1

    def next(self) -> C:
        self._require_next()
        return self._records[self._index + 1].change

    def update_graph_with_undo(self, change: C) -> None:
        del change
        self._require_prev()
        self._index -= 1
        self._refresh()

    def update_graph_with_redo(self, change: C) -> None:
        self._require_next()
        expected = self._records[self._index + 1].change
        if expected != change:
            raise UnexpectedChangeError(expected, change)
        self._index += 1
        self._refresh()

    def push(self, change: C) -> None:
        self._ensure_open()
        self._drop_redo_side()
        self._records.append(ChangeRecord(change=change))
        self._index = len(self._records) - 1
        self._enforce_capacity()
        self._refresh()

    def push_merged(self, combined: C) -> None:
        self._require_prev()
        self._drop_redo_side()
        replaced = self._records[self._index]
        replaced.valid = False
        if replaced is self._marked:
            self._marked = None
        self._records[self._index] = ChangeRecord(change=combined)
        self._refresh()

    def forget_history(self) -> None:
        self._ensure_open()
        if self._index == 0:
            return
        dropped = self._drop_oldest(self._index)
        telemetry.record_event(
            "queue.history_forgotten",
            level="debug",
            data={"dropped": dropped},
            logger_name=self._logger_name,
        )
        self._refresh()

    def history(self) -> Tuple[C, ...]:
        self._ensure_open()
        return tuple(record.change for record in self._records[1 : self._index + 1])

    def _drop_redo_side(self) -> None:
        for record in self._records[self._index + 1 :]:
            record.valid = False
        del self._records[self._index + 1 :]

    def _enforce_capacity(self) -> None:
        if self.capacity is None:
            return
        overflow = len(self._records) - 1 - self.capacity
        if overflow > 0:
            self._drop_oldest(overflow)

    def _drop_oldest(self, count: int) -> int:
        for record in self._records[:count]:
            record.valid = False
        del self._records[:count]
        self._index -= count
        if self._marked is not None and not self._marked.valid:
            self._marked = None
        return count


__all__ = ["LinearChangeQueue"]
