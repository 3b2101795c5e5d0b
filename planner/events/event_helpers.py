"""Event helper utilities.

Helpers for publishing planner events on a bus (the global one by default).

Quick import:
    from planner.events.event_helpers import (
        publish_command_applied, publish_depleted, publish_expiring_snapshot
    )
"""
from __future__ import annotations
from typing import Iterable, Any, Optional
from .Event_Bus import (
    EventBus, GLOBAL_EVENT_BUS, COMMAND_APPLIED, LEDGER_DEPLETED, LEDGER_EXPIRING_SNAPSHOT
)

__all__ = ['publish_command_applied', 'publish_depleted', 'publish_expiring_snapshot']


def publish_command_applied(command: str, week_start_date: str, bus: Optional[EventBus] = None):
    (bus or GLOBAL_EVENT_BUS).publish(COMMAND_APPLIED, {
        'command': command,
        'weekStartDate': week_start_date,
    })


def publish_depleted(ingredient: Any, bus: Optional[EventBus] = None):
    """Publish a ledger.depleted event (stock reached zero)."""
    (bus or GLOBAL_EVENT_BUS).publish(LEDGER_DEPLETED, {'ingredient': ingredient})


def publish_expiring_snapshot(items: Iterable[dict], bus: Optional[EventBus] = None):
    """Publish a snapshot of ingredients that will expire soon.

    Payload structure:
        {
          'count': <int>,
          'items': [ { id, name, count, category, days_left }, ... ]
        }
    """
    items_list = list(items)
    (bus or GLOBAL_EVENT_BUS).publish(LEDGER_EXPIRING_SNAPSHOT, {
        'count': len(items_list),
        'items': items_list
    })
