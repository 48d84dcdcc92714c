"""Undo manager that keeps a change queue in step with an external document.

The manager listens to a change source that reports every edit made to the
document, including the edits the manager itself triggers while undoing or
redoing. Before applying a change of its own it records the change it expects
to observe; the matching notification is then swallowed instead of being
recorded as a new edit.
"""

from __future__ import annotations

from typing import Callable, Generic, Optional, Protocol, runtime_checkable

from undo_engine.errors import UnexpectedChangeError
from undo_engine.observable import ObservableFlag, Subscription
from undo_engine.queue import ChangeQueue, QueuePosition
from undo_engine.queue.base import C
from undo_engine.runtime import telemetry

Invert = Callable[[C], C]
Apply = Callable[[C], None]
Merge = Callable[[C, C], Optional[C]]


class ChangeSource(Protocol[C]):
    """Anything that pushes changes to subscribers and returns a subscription."""

    def subscribe(self, callback: Callable[[C], None]) -> Subscription:
        ...


@runtime_checkable
class UndoPositionProtocol(Protocol):
    """A remembered history position that can be marked as the clean state."""

    def mark(self) -> None:
        ...

    def is_valid(self) -> bool:
        ...


@runtime_checkable
class UndoManagerProtocol(Protocol):
    """Public operations of an undo manager."""

    def undo(self) -> bool:
        ...

    def redo(self) -> bool:
        ...

    def prevent_merge(self) -> None:
        ...

    def forget_history(self) -> None:
        ...

    def close(self) -> None:
        ...

    def is_undo_available(self) -> bool:
        ...

    def is_redo_available(self) -> bool:
        ...

    def is_performing_action(self) -> bool:
        ...

    def is_at_marked_position(self) -> bool:
        ...

    def get_current_position(self) -> UndoPositionProtocol:
        ...


class UndoPosition:
    """Position handed out by ``UndoManager.get_current_position``."""

    def __init__(self, manager: "UndoManager[object]", position: QueuePosition) -> None:
        self._manager = manager
        self._position = position

    def mark(self) -> None:
        """Remember this position as the clean state.

        Marking also stops the next edit from merging into the marked one.
        """

        self._manager.prevent_merge()
        self._manager.queue.mark(self._position)

    def is_valid(self) -> bool:
        return self._position.is_valid()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UndoPosition):
            return NotImplemented
        return self._position == other._position

    def __hash__(self) -> int:
        return hash(self._position)


class UndoManager(Generic[C]):
    """Coordinates undo/redo between a change queue and a live document."""

    def __init__(
        self,
        queue: ChangeQueue[C],
        invert: Invert[C],
        apply: Apply[C],
        merge: Merge[C],
        change_source: ChangeSource[C],
        *,
        logger_name: str | None = None,
    ) -> None:
        for name, func in (("invert", invert), ("apply", apply), ("merge", merge)):
            if not callable(func):
                raise TypeError(f"{name} must be callable")
        self.queue = queue
        self._invert = invert
        self._apply = apply
        self._merge = merge
        self._logger_name = logger_name
        self._can_merge = False
        self._expected_change: Optional[C] = None
        self._subscription = change_source.subscribe(self._change_observed)

    @property
    def undo_available(self) -> ObservableFlag:
        return self.queue.undo_available

    @property
    def redo_available(self) -> ObservableFlag:
        return self.queue.redo_available

    @property
    def performing_action(self) -> ObservableFlag:
        return self.queue.performing_action

    @property
    def at_marked_position(self) -> ObservableFlag:
        return self.queue.at_marked_position

    def is_undo_available(self) -> bool:
        return self.queue.is_undo_available()

    def is_redo_available(self) -> bool:
        return self.queue.is_redo_available()

    def is_performing_action(self) -> bool:
        return self.queue.is_performing_action()

    def is_at_marked_position(self) -> bool:
        return self.queue.is_at_marked_position()

    def get_current_position(self) -> UndoPosition:
        return UndoPosition(self, self.queue.get_current_position())

    def undo(self) -> bool:
        if not self.is_undo_available():
            return False
        with telemetry.span(
            "undo_manager::undo",
            logger_name=self._logger_name,
            component="undo_manager",
        ):
            self._can_merge = False
            inverted = self._invert(self.queue.prev())
            self._perform_change(inverted, self.queue.update_graph_with_undo)
        return True

    def redo(self) -> bool:
        if not self.is_redo_available():
            return False
        with telemetry.span(
            "undo_manager::redo",
            logger_name=self._logger_name,
            component="undo_manager",
        ):
            self._can_merge = False
            change = self.queue.next()
            self._perform_change(change, self.queue.update_graph_with_redo)
        return True

    def prevent_merge(self) -> None:
        self._can_merge = False

    def forget_history(self) -> None:
        self.queue.forget_history()

    def close(self) -> None:
        self._subscription.unsubscribe()
        self.queue.close()
        self._expected_change = None

    def _perform_change(self, change: C, update_graph: Callable[[C], None]) -> None:
        self._expected_change = change
        try:
            with self.queue.performing_action.suspended():
                self._apply(change)
                update_graph(change)
        except Exception:
            self._expected_change = None
            raise

    def _change_observed(self, change: C) -> None:
        expected = self._expected_change
        if expected is None:
            self._add_change(change)
        elif expected == change:
            self._expected_change = None
        else:
            telemetry.record_event(
                "undo_manager.unexpected_change",
                level="error",
                data={"expected": expected, "received": change},
                logger_name=self._logger_name,
            )
            raise UnexpectedChangeError(expected, change)

    def _add_change(self, change: C) -> None:
        if self._can_merge and self.queue.has_prev():
            prev = self.queue.prev()
            merged = self._merge(prev, change)
            if merged is not None:
                self.queue.push_merged(merged)
                telemetry.record_event(
                    "undo_manager.merged",
                    level="debug",
                    logger_name=self._logger_name,
                )
            else:
                self.queue.push_unmerged(prev, change)
        else:
            self.queue.push(change)
        self._can_merge = True


__all__ = [
    "ChangeSource",
    "UndoManager",
    "UndoManagerProtocol",
    "UndoPosition",
    "UndoPositionProtocol",
]
