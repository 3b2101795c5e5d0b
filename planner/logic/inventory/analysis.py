"""Inventory views: sorted listing and expiring-soon detection."""
from __future__ import annotations
from datetime import date
from typing import List, Dict, Any, Optional

from planner.domain.Ingredient import Ingredient
from planner.domain.PlannerState import PlannerState
from planner.utilities.config import EXPIRING_SOON_DAYS
from planner.utilities.constants import CATEGORIES
from planner.utilities.dates import days_until

__all__ = ["is_expiring_soon", "compute_expiring_soon", "compute_depleted", "sorted_inventory"]


def is_expiring_soon(ingredient: Ingredient, *, window: int | None = None, today: Optional[date] = None) -> bool:
    """True when the expiration date is today or within ``window`` days (already expired is False)."""
    left = days_until(ingredient.expiration_date, today)
    if left is None:
        return False
    return 0 <= left <= (window if window is not None else EXPIRING_SOON_DAYS)


def compute_expiring_soon(ingredients: List[Ingredient], *, window: int | None = None,
                          today: Optional[date] = None) -> List[Dict[str, Any]]:
    result: List[Dict[str, Any]] = []
    for ing in ingredients:
        if is_expiring_soon(ing, window=window, today=today):
            result.append({
                'id': ing.id,
                'name': ing.name,
                'count': ing.count,
                'category': ing.category,
                'days_left': days_until(ing.expiration_date, today),
            })
    result.sort(key=lambda x: (x['days_left'], x['name']))
    return result


def compute_depleted(ingredients: List[Ingredient]) -> List[Dict[str, Any]]:
    return [{'id': ing.id, 'name': ing.name, 'category': ing.category}
            for ing in ingredients if ing.count <= 0]


def _category_rank(category: str, custom_categories: List[str]) -> int:
    order = list(CATEGORIES) + list(custom_categories)
    return order.index(category) if category in order else len(order)


def sorted_inventory(state: PlannerState, sort: Optional[str] = None) -> List[Ingredient]:
    """Pinned items first, then by category order or by nearest expiration (undated last)."""
    mode = sort or state.inventory_sort
    items = list(state.ledger.items)
    if mode == 'expiry':
        key = lambda i: (not i.pinned, i.expiration_date is None, i.expiration_date or date.max, i.name.lower())
    else:
        key = lambda i: (not i.pinned, _category_rank(i.category, state.custom_categories), i.name.lower())
    return sorted(items, key=key)
