"""Simple Event Bus / Observer implementation for planner notifications.

Event names used so far:
  planner.command_applied -> payload {"command": str, "weekStartDate": str}
  ledger.depleted -> payload {"ingredient": Ingredient}
  ledger.expiring_snapshot -> payload {"count": int, "items": [ {id, name, count, category, days_left}, ... ]}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
COMMAND_APPLIED = "planner.command_applied"
LEDGER_DEPLETED = "ledger.depleted"
LEDGER_EXPIRING_SNAPSHOT = "ledger.expiring_snapshot"


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def publish(self, event_name: str, payload: Any):
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception as e:  # pragma: no cover - a failing listener must not break a command
				logger.error(f"[EventBus] Error delivering {event_name} to {cb}: {e}")


# A singleton-like instance (can be imported)
GLOBAL_EVENT_BUS = EventBus()

__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS', 'COMMAND_APPLIED', 'LEDGER_DEPLETED', 'LEDGER_EXPIRING_SNAPSHOT'
]
