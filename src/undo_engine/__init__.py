"""Branching undo/redo coordination for editors."""

from .errors import (
    EmptyHistoryError,
    QueueClosedError,
    UndoEngineError,
    UnexpectedChangeError,
)
from .factory import (
    fixed_size_history_undo_manager,
    nonlinear_undo_manager,
    unlimited_history_undo_manager,
    zero_history_undo_manager,
)
from .manager import UndoManager, UndoManagerProtocol, UndoPosition
from .observable import EventChannel, ObservableFlag, Subscription, SuspendableFlag
from .queue import (
    ChangeQueue,
    LinearChangeQueue,
    NonlinearChangeQueue,
    QueuePosition,
)

__all__ = [
    "ChangeQueue",
    "EmptyHistoryError",
    "EventChannel",
    "LinearChangeQueue",
    "NonlinearChangeQueue",
    "ObservableFlag",
    "QueueClosedError",
    "QueuePosition",
    "Subscription",
    "SuspendableFlag",
    "UndoEngineError",
    "UndoManager",
    "UndoManagerProtocol",
    "UndoPosition",
    "UnexpectedChangeError",
    "fixed_size_history_undo_manager",
    "nonlinear_undo_manager",
    "unlimited_history_undo_manager",
    "zero_history_undo_manager",
]

__version__ = "0.1.0"
