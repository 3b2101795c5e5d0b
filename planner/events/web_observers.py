"""Web-facing observers for planner events.

Subscribes to an event bus for command, depletion and expiry events and keeps a
bounded in-memory ring buffer that the HTTP layer serves at ``/api/events``.

Design:
  * Each event stored with an auto-increment integer id (cursor) so clients
    can request only newer events (since=<last_id_seen>).
  * A Lock guards the buffer (sync FastAPI endpoints run in a threadpool).
  * A MAX_EVENTS cap prevents unbounded memory growth.
"""
from __future__ import annotations
from typing import List, Dict, Any, Optional
from threading import Lock
from datetime import datetime, timezone

from .Event_Bus import (
    EventBus, GLOBAL_EVENT_BUS, COMMAND_APPLIED, LEDGER_DEPLETED, LEDGER_EXPIRING_SNAPSHOT
)

MAX_EVENTS = 300  # keep a few hundred recent events


class EventRecorder:
    def __init__(self, max_events: int = MAX_EVENTS):
        self._lock = Lock()
        self._events: List[Dict[str, Any]] = []
        self._next_id = 1
        self.max_events = max_events

    def record(self, event_name: str, payload: Any):  # signature expected by EventBus
        with self._lock:
            evt = {
                'id': self._next_id,
                'type': event_name,
                'ts': datetime.now(timezone.utc).isoformat(),
            }
            if isinstance(payload, dict):
                ing = payload.get('ingredient')
                if ing is not None and hasattr(ing, 'name'):
                    evt['name'] = ing.name
                    evt['ingredientId'] = ing.id
                for k in ('command', 'weekStartDate', 'count'):
                    if k in payload:
                        evt[k] = payload[k]
            self._events.append(evt)
            self._next_id += 1
            # Trim buffer
            if len(self._events) > self.max_events:
                del self._events[: len(self._events) - self.max_events]

    def attach(self, bus: EventBus = GLOBAL_EVENT_BUS) -> "EventRecorder":
        for name in (COMMAND_APPLIED, LEDGER_DEPLETED, LEDGER_EXPIRING_SNAPSHOT):
            bus.subscribe(name, self.record)
        return self

    def get_events(self, since: Optional[int] = None) -> Dict[str, Any]:
        """Return events newer than 'since' (exclusive).

        Response includes next_cursor (largest id) so client can poll with since=next_cursor.
        """
        with self._lock:
            if since is None:
                data = list(self._events)
            else:
                data = [e for e in self._events if e['id'] > since]
            next_cursor = self._events[-1]['id'] if self._events else since or 0
        return {'events': data, 'next_cursor': next_cursor}


__all__ = ['EventRecorder', 'MAX_EVENTS']
