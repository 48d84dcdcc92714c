"""Exception hierarchy shared by change queues and undo managers."""

from __future__ import annotations

from typing import Any


class UndoEngineError(RuntimeError):
    """Base class for every error raised by undo_engine."""


class EmptyHistoryError(UndoEngineError):
    """Raised when a queue is asked for a step it does not have.

    Callers are expected to gate ``prev()``/``next()`` on ``has_prev()``/
    ``has_next()``; hitting this error is a programming mistake.
    """

    def __init__(self, message: str, *, direction: str) -> None:
        super().__init__(message)
        self.direction = direction


class UnexpectedChangeError(UndoEngineError):
    """Raised when an observed change differs from the one being applied."""

    def __init__(self, expected: Any, received: Any) -> None:
        message = (
            "Unexpected change received."
            f"\nExpected:\n{expected!r}"
            f"\nReceived:\n{received!r}"
        )
        super().__init__(message)
        self.expected = expected
        self.received = received


class QueueClosedError(UndoEngineError):
    """Raised when a closed change queue is used."""


__all__ = [
    "UndoEngineError",
    "EmptyHistoryError",
    "UnexpectedChangeError",
    "QueueClosedError",
]
