"""Whole-state backup: export, validated import and demo reset."""
from __future__ import annotations
import logging
from typing import Any, Dict

from planner.domain.Ledger import Ledger
from planner.domain.Meal import Meal
from planner.domain.PlannerState import PlannerState
from planner.domain.Profile import Profile
from planner.logic.grid.addressing import ensure_plan
from planner.logic.importing.demo import create_demo_state
from planner.logic.importing.legacy import normalize_week_plans
from planner.utilities.dates import parse_iso_date, start_of_week_monday, to_iso_date

logger = logging.getLogger(__name__)

__all__ = ["REQUIRED_KEYS", "validate_payload", "import_state", "export_state", "reset_demo_data"]

REQUIRED_KEYS = ("ingredients", "meals", "weekPlans", "currentWeekStartDate")
EXPORT_KEYS = ("ingredients", "meals", "profiles", "customCategories", "pinnedMealIds",
               "weekPlans", "currentWeekStartDate")


def validate_payload(payload: Any) -> bool:
    """Shape check for an import; any failure rejects the whole payload."""
    if not isinstance(payload, dict):
        return False
    if any(payload.get(key) is None for key in REQUIRED_KEYS):
        return False
    if not isinstance(payload["ingredients"], list) or not isinstance(payload["meals"], list):
        return False
    if not isinstance(payload["weekPlans"], dict):
        return False
    if not isinstance(payload["currentWeekStartDate"], str) or parse_iso_date(payload["currentWeekStartDate"]) is None:
        return False
    return True


def import_state(state: PlannerState, payload: Dict[str, Any]) -> PlannerState:
    """Replace the whole state from a backup payload, or return ``state`` when it is invalid."""
    if not validate_payload(payload):
        missing = [k for k in REQUIRED_KEYS if not isinstance(payload, dict) or payload.get(k) is None]
        logger.warning(f"Rejected state import (missing or malformed: {missing or 'field types'})")
        return state

    profiles = [Profile.from_dict(p) for p in payload.get("profiles") or [] if isinstance(p, dict)]
    if not profiles:
        profiles = [Profile()]
    profile_ids = {p.id for p in profiles}
    meals = [Meal.from_dict(m) for m in payload["meals"] if isinstance(m, dict)]
    meal_ids = {m.id for m in meals}
    week = to_iso_date(start_of_week_monday(parse_iso_date(payload["currentWeekStartDate"])))

    new_state = PlannerState(
        ledger=Ledger.from_dict(payload["ingredients"]),
        meals=meals,
        profiles=profiles,
        custom_categories=[c for c in payload.get("customCategories") or [] if isinstance(c, str)],
        pinned_meal_ids=[i for i in payload.get("pinnedMealIds") or [] if i in meal_ids],
        week_plans=normalize_week_plans(payload["weekPlans"], profile_ids),
        current_week_start_date=week,
        inventory_sort="category",
    )
    ensure_plan(new_state.week_plans, week)
    logger.info(f"Imported state: {len(new_state.ingredients)} ingredients, {len(meals)} meals, "
                f"{len(new_state.week_plans)} weeks")
    return new_state


def export_state(state: PlannerState) -> Dict[str, Any]:
    data = state.to_dict()
    return {key: data[key] for key in EXPORT_KEYS}


def reset_demo_data(state: PlannerState) -> PlannerState:
    return create_demo_state()
