"""Branching history store.

Every node holds one change and remembers all branches that were ever pushed
after it. The branch taken last is *active*: ``redo`` follows it. Undoing and
then pushing a different edit adds a new branch and leaves the old one dormant
under the fork point, where ``select_redo_branch`` can bring it back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from undo_engine.errors import UnexpectedChangeError
from undo_engine.runtime import telemetry

from .base import C, ChangeQueue, ChangeRecord


@dataclass(eq=False, slots=True)
class _ChangeNode(ChangeRecord):
    parent: Optional[_ChangeNode] = None
    branches: List[_ChangeNode] = field(default_factory=list)
    active: Optional[_ChangeNode] = None


def _prune(node: _ChangeNode) -> int:
    """Invalidate ``node`` and its whole subtree; return the number of nodes."""

    count = 0
    pending = [node]
    while pending:
        current = pending.pop()
        pending.extend(current.branches)
        current.valid = False
        current.parent = None
        current.active = None
        current.branches = []
        count += 1
    return count


class NonlinearChangeQueue(ChangeQueue[C]):
    """History graph whose redo side is kept when a new edit branches off."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        super().__init__(logger_name=logger_name)
        self._root = _ChangeNode(change=None)
        self._position = self._root
        self._marked = self._root
        self._refresh()

    def _current(self) -> ChangeRecord:
        return self._position

    def _release(self) -> None:
        _prune(self._root)
        self._position = self._root

    def has_prev(self) -> bool:
        self._ensure_open()
        return self._position.parent is not None

    def prev(self) -> C:
        self._require_prev()
        return self._position.change

    def has_next(self) -> bool:
        self._ensure_open()
        return self._position.active is not None

    def next(self) -> C:
        self._require_next()
        assert self._position.active is not None
        return self._position.active.change

    def update_graph_with_undo(self, change: C) -> None:
        del change  # inverse of prev(); the graph only stores forward changes
        self._require_prev()
        node = self._position
        parent = node.parent
        assert parent is not None
        parent.active = node
        self._position = parent
        self._refresh()

    def update_graph_with_redo(self, change: C) -> None:
        self._require_next()
        target = self._position.active
        assert target is not None
        if target.change != change:
            raise UnexpectedChangeError(target.change, change)
        self._position = target
        self._refresh()

    def push(self, change: C) -> None:
        self._ensure_open()
        fork = self._position
        if fork.active is not None:
            telemetry.record_event(
                "queue.branch_created",
                level="debug",
                data={"dormant": len(fork.branches)},
                logger_name=self._logger_name,
            )
        self._attach(fork, change)
        self._refresh()

    def push_merged(self, combined: C) -> None:
        self._require_prev()
        replaced = self._position
        parent = replaced.parent
        assert parent is not None
        if not replaced.branches and replaced is not self._marked:
            parent.branches.remove(replaced)
            _prune(replaced)
        self._attach(parent, combined)
        self._refresh()

    def forget_history(self) -> None:
        self._ensure_open()
        keep = self._position
        parent = keep.parent
        if parent is None:
            return
        with telemetry.span(
            "queue::forget_history",
            logger_name=self._logger_name,
            component="queue",
        ) as handle:
            parent.branches.remove(keep)
            keep.parent = None
            pruned = _prune(self._root)
            self._root = keep
            if self._marked is not None and not self._marked.valid:
                self._marked = None
            handle.add_metadata("pruned", pruned)
            self._refresh()

    def history(self) -> Tuple[C, ...]:
        self._ensure_open()
        changes: List[C] = []
        node = self._position
        while node.parent is not None:
            changes.append(node.change)
            node = node.parent
        return tuple(reversed(changes))

    def redo_branches(self) -> Tuple[C, ...]:
        """Changes of every branch leaving the current position, oldest first."""

        self._ensure_open()
        return tuple(branch.change for branch in self._position.branches)

    def active_branch_index(self) -> Optional[int]:
        self._ensure_open()
        fork = self._position
        for index, branch in enumerate(fork.branches):
            if branch is fork.active:
                return index
        return None

    def select_redo_branch(self, index: int) -> None:
        self._ensure_open()
        with telemetry.span(
            "queue::select_redo_branch",
            logger_name=self._logger_name,
            component="queue",
            metadata={"branch": index},
        ):
            branches = self._position.branches
            if not 0 <= index < len(branches):
                raise IndexError(
                    f"Branch {index} out of range ({len(branches)} available)"
                )
            self._position.active = branches[index]
            self._refresh()

    def _attach(self, parent: _ChangeNode, change: C) -> None:
        child = _ChangeNode(change=change, parent=parent)
        parent.branches.append(child)
        parent.active = child
        self._position = child


__all__ = ["NonlinearChangeQueue"]
