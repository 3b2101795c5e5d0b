"""Planner session: the single owner of the live planner state.

Commands are applied strictly one at a time. A command that returns a new state is
recorded in history (snapshot of the previous state), committed, announced on the
event bus and persisted when a repository is attached. Navigation commands skip the
history.
"""
from __future__ import annotations
import logging
from threading import RLock
from typing import Callable, Optional

from planner.domain.PlannerState import PlannerState
from planner.events.Event_Bus import EventBus, GLOBAL_EVENT_BUS
from planner.events.event_helpers import publish_command_applied, publish_depleted, publish_expiring_snapshot
from planner.logic.grid.addressing import ensure_plan
from planner.logic.history.manager import HistoryManager
from planner.logic.importing.demo import create_demo_state
from planner.logic.inventory.analysis import compute_expiring_soon

logger = logging.getLogger(__name__)

Command = Callable[..., PlannerState]


class PlannerSession:
    def __init__(self, state: Optional[PlannerState] = None, history: Optional[HistoryManager] = None,
                 event_bus: Optional[EventBus] = None, repository=None):
        self._lock = RLock()
        self.state = state or create_demo_state()
        if self.state.current_plan() is None:
            self.state = self.state.clone()
            ensure_plan(self.state.week_plans, self.state.current_week_start_date)
        self.history = history or HistoryManager()
        self.event_bus = event_bus or GLOBAL_EVENT_BUS
        self.repository = repository

    @classmethod
    def open(cls, repository, **kwargs) -> "PlannerSession":
        """Load the stored state, falling back to the demo seed."""
        state = repository.load()
        if state is None:
            logger.info("No stored planner state, starting from demo data")
        return cls(state=state, repository=repository, **kwargs)

    # -------------------- Commands --------------------
    def dispatch(self, command: Command, *args, **kwargs) -> bool:
        """Apply a mutating command; returns False when it was a no-op."""
        with self._lock:
            current = self.state
            new_state = command(current, *args, **kwargs)
            if new_state is current:
                logger.debug(f"{command.__name__} was a no-op")
                return False
            self.history.record(current)
            self._commit(new_state, command.__name__)
            return True

    def navigate(self, command: Command, *args, **kwargs) -> bool:
        """Apply a navigation command (week switching); not recorded in history."""
        with self._lock:
            current = self.state
            new_state = command(current, *args, **kwargs)
            if new_state is current:
                return False
            self.state = new_state
            self._persist()
            return True

    def undo(self) -> bool:
        with self._lock:
            previous = self.history.undo(self.state)
            if previous is None:
                return False
            self._commit(previous, "undo")
            return True

    def redo(self) -> bool:
        with self._lock:
            following = self.history.redo(self.state)
            if following is None:
                return False
            self._commit(following, "redo")
            return True

    def announce_expiring(self):
        publish_expiring_snapshot(compute_expiring_soon(self.state.ingredients), bus=self.event_bus)

    # -------------------- Internals --------------------
    def _commit(self, new_state: PlannerState, label: str):
        depleted_before = {i.id for i in self.state.ingredients if i.count <= 0}
        self.state = new_state
        publish_command_applied(label, new_state.current_week_start_date, bus=self.event_bus)
        for ingredient in new_state.ingredients:
            if ingredient.count <= 0 and ingredient.id not in depleted_before:
                publish_depleted(ingredient, bus=self.event_bus)
        self._persist()

    def _persist(self):
        if self.repository is not None:
            self.repository.save(self.state)
