"""Merge externally parsed draft items (receipt scans, AI text) into the ledger."""
from __future__ import annotations
import logging
from typing import Any, Iterable

from planner.domain.PlannerState import PlannerState

logger = logging.getLogger(__name__)

__all__ = ["merge_receipt_items"]


def _field(item: Any, name: str, default=None):
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


def _draft_count(value) -> float:
    return max(1, value) if isinstance(value, (int, float)) else 1


def merge_receipt_items(state: PlannerState, items: Iterable[Any]) -> PlannerState:
    """Add each draft ``{name, category, count}`` to the ingredient with the same canonical
    name, or create it with servings_per_count 1. Counts below 1 count as 1."""
    drafts = [item for item in items or [] if str(_field(item, "name") or "").strip()]
    if not drafts:
        return state
    new_state = state.clone()
    ledger = new_state.ledger
    for item in drafts:
        name = str(_field(item, "name")).strip()
        count = _draft_count(_field(item, "count"))
        found = ledger.find_by_name(name)
        if found is not None:
            found.adjust_count(count)
        else:
            ledger.merge_or_create(name, count, custom_categories=new_state.custom_categories,
                                   category=_field(item, "category"), servings_per_count=1)
    logger.info(f"Merged {len(drafts)} draft items into the inventory")
    return new_state
