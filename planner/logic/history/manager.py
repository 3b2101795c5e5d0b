"""Snapshot-based undo/redo over whole planner states.

``record`` is called with the live state right before a command's result replaces
it. The past stack is bounded; when full, the oldest snapshot is dropped. Any new
record clears the future stack.
"""
from __future__ import annotations
import logging
from collections import deque
from typing import Deque, List, Optional

from planner.domain.PlannerState import PlannerState
from planner.utilities.config import HISTORY_LIMIT

logger = logging.getLogger(__name__)


class HistoryManager:
    def __init__(self, capacity: int = HISTORY_LIMIT):
        self.capacity = max(1, capacity)
        self._past: Deque[PlannerState] = deque(maxlen=self.capacity)
        self._future: List[PlannerState] = []

    @property
    def can_undo(self) -> bool:
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        return bool(self._future)

    def __len__(self) -> int:
        return len(self._past)

    def record(self, current: PlannerState):
        """Push a snapshot of the pre-command state and drop the redo branch."""
        self._past.append(current.clone())
        self._future.clear()

    def undo(self, current: PlannerState) -> Optional[PlannerState]:
        if not self._past:
            return None
        previous = self._past.pop()
        self._future.append(current.clone())
        logger.debug(f"Undo -> {len(self._past)} left, {len(self._future)} redoable")
        return previous

    def redo(self, current: PlannerState) -> Optional[PlannerState]:
        if not self._future:
            return None
        following = self._future.pop()
        self._past.append(current.clone())
        logger.debug(f"Redo -> {len(self._past)} undoable, {len(self._future)} left")
        return following

    def clear(self):
        self._past.clear()
        self._future.clear()

    def status(self) -> dict:
        return {"canUndo": self.can_undo, "canRedo": self.can_redo,
                "past": len(self._past), "future": len(self._future)}
