"""History stores the undo manager navigates."""

from .base import ChangeQueue, ChangeRecord, QueuePosition
from .linear import LinearChangeQueue
from .nonlinear import NonlinearChangeQueue

__all__ = [
    "ChangeQueue",
    "ChangeRecord",
    "QueuePosition",
    "LinearChangeQueue",
    "NonlinearChangeQueue",
]
