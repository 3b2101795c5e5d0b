"""Nutrition aggregation per profile and day for the current week.

A family slot counts toward every profile; a profile slot only toward its owner.
Ingredient nutrition is per serving, multiplied by the ref quantity.
"""
from __future__ import annotations
from typing import Dict, Any, Optional

from planner.domain.Ingredient import NUTRITION_FIELDS
from planner.domain.Ledger import Ledger
from planner.domain.PlannerState import PlannerState
from planner.domain.WeekPlan import SlotEntry
from planner.utilities.constants import DAYS_PER_WEEK
from planner.utilities.dates import day_date, to_iso_date

__all__ = ["empty_totals", "slot_nutrition", "compute_week_nutrition"]

# goal attribute -> nutrition field it tracks
GOAL_TO_FIELD = {
    "daily_calorie_goal": "calories",
    "daily_protein_goal_g": "protein_g",
    "daily_carbs_goal_g": "carbs_g",
    "daily_fat_goal_g": "fat_g",
}


def empty_totals() -> Dict[str, float]:
    return {f: 0 for f in NUTRITION_FIELDS}


def _add(total: Dict[str, float], other: Dict[str, float]) -> Dict[str, float]:
    return {f: total[f] + other[f] for f in NUTRITION_FIELDS}


def slot_nutrition(slot: Optional[SlotEntry], ledger: Ledger) -> Dict[str, float]:
    totals = empty_totals()
    if slot is None:
        return totals
    for ref in slot.ingredient_refs:
        ingredient = ledger.resolve(ref.ingredient_id, ref.name)
        if ingredient is None:
            continue
        per_serving = ingredient.nutrition()
        totals = _add(totals, {f: per_serving[f] * ref.qty for f in NUTRITION_FIELDS})
    return totals


def _percent(value: float, goal: Optional[float]) -> Optional[int]:
    if not goal:
        return None
    return round(value / goal * 100)


def compute_week_nutrition(state: PlannerState, week_start_date: Optional[str] = None) -> Dict[str, Any]:
    """Aggregate nutrition stats per profile for a week plan.

    Returns structure:
    {
      'weekStartDate': 'yyyy-mm-dd',
      'days': [ { 'day': 0, 'date': 'yyyy-mm-dd',
                  'profiles': { profile_id: { 'calories', 'protein_g', 'carbs_g', 'fat_g',
                                              'goals': { goal_name: percent } } } }, ... ],
      'week_totals': { profile_id: { 'calories', 'protein_g', 'carbs_g', 'fat_g' } }
    }
    """
    week = week_start_date or state.current_week_start_date
    plan = state.week_plans.get(week)
    days = []
    week_totals = {p.id: empty_totals() for p in state.profiles}

    for day in range(DAYS_PER_WEEK):
        per_profile = {p.id: empty_totals() for p in state.profiles}
        if plan is not None:
            for meal_type in plan.grid:
                cell = plan.get_cell(meal_type, day)
                if cell is None:
                    continue
                family = slot_nutrition(cell.family, state.ledger)
                for profile in state.profiles:
                    personal = slot_nutrition(cell.profiles.get(profile.id), state.ledger)
                    per_profile[profile.id] = _add(_add(per_profile[profile.id], family), personal)
        profiles_out = {}
        for profile in state.profiles:
            totals = per_profile[profile.id]
            week_totals[profile.id] = _add(week_totals[profile.id], totals)
            goals = {name: _percent(totals[GOAL_TO_FIELD[name]], goal) for name, goal in profile.goals().items()}
            profiles_out[profile.id] = dict(totals, goals=goals)
        d = day_date(week, day)
        days.append({'day': day, 'date': to_iso_date(d) if d else None, 'profiles': profiles_out})

    return {'weekStartDate': week, 'days': days, 'week_totals': week_totals}
