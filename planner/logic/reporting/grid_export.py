"""Serializable week grid handed to the image exporter (a pure consumer)."""
from __future__ import annotations
from typing import Any, Dict, List, Optional

from planner.domain.PlannerState import PlannerState
from planner.domain.WeekPlan import CellEntry, SlotEntry
from planner.utilities.constants import MEAL_TYPES, DAYS_PER_WEEK

__all__ = ["resolve_meal_name", "build_export_cell", "build_week_grid_payload"]

FAMILY_LABEL = "Family"


def resolve_meal_name(state: PlannerState, slot: SlotEntry) -> Optional[str]:
    meal = state.find_meal(slot.meal_id) if slot.meal_id else None
    return meal.name if meal else slot.ad_hoc_meal_name


def build_export_cell(state: PlannerState, cell: Optional[CellEntry]) -> Optional[Dict[str, Any]]:
    """Flatten one cell into labelled meal names and ingredient lines."""
    if cell is None:
        return None
    labelled = []
    if cell.family is not None:
        labelled.append((FAMILY_LABEL, cell.family))
    for profile in state.profiles:
        slot = cell.profiles.get(profile.id)
        if slot is not None:
            labelled.append((profile.name, slot))
    if not labelled:
        return None

    names = [f"{label}: {resolve_meal_name(state, slot) or 'Meal'}" for label, slot in labelled]
    ingredients = [{"name": f"{label}: {ref.name}", "qty": ref.qty}
                   for label, slot in labelled for ref in slot.ingredient_refs]
    return {
        "mealName": " | ".join(names),
        "ingredients": ingredients,
        "servings": sum(slot.servings for _, slot in labelled),
        "isLeftovers": all(slot.is_leftovers for _, slot in labelled),
    }


def build_week_grid_payload(state: PlannerState, week_start_date: Optional[str] = None) -> Dict[str, Any]:
    week = week_start_date or state.current_week_start_date
    plan = state.week_plans.get(week)
    grid: Dict[str, List[Optional[Dict[str, Any]]]] = {}
    for meal_type in MEAL_TYPES:
        row = plan.grid[meal_type] if plan else [None] * DAYS_PER_WEEK
        grid[meal_type] = [build_export_cell(state, cell) for cell in row]
    return {"weekStartDate": week, "weekPlan": {"grid": grid}}
