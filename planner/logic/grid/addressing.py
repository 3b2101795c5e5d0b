"""Week plan addressing: ensure, read and write slots, and move between weeks."""
from __future__ import annotations
from typing import Dict, Optional

from planner.domain.PlannerState import PlannerState
from planner.domain.WeekPlan import CellEntry, SlotAddress, SlotEntry, WeekPlan
from planner.utilities.dates import parse_iso_date, shift_week_start, start_of_week_monday, to_iso_date

__all__ = ["ensure_plan", "get_slot", "set_slot", "shift_week", "set_week"]


def ensure_plan(week_plans: Dict[str, WeekPlan], week_start_date: str) -> WeekPlan:
    """Return the plan for ``week_start_date``, inserting an empty one when missing."""
    plan = week_plans.get(week_start_date)
    if plan is None:
        plan = WeekPlan(week_start_date)
        week_plans[week_start_date] = plan
    return plan


def get_slot(plan: Optional[WeekPlan], address: SlotAddress) -> Optional[SlotEntry]:
    if plan is None:
        return None
    cell = plan.get_cell(address.meal_type, address.day)
    return cell.get(address) if cell else None


def set_slot(plan: WeekPlan, address: SlotAddress, slot: Optional[SlotEntry]) -> WeekPlan:
    """Copy-on-write slot write; a cell left with no slots collapses to ``None``."""
    updated = plan.clone()
    cell = updated.get_cell(address.meal_type, address.day) or CellEntry()
    cell.set(address, slot.copy() if slot else None)
    updated.set_cell(address.meal_type, address.day, cell)
    return updated


def _move_to(state: PlannerState, week_start_date: str) -> PlannerState:
    if week_start_date == state.current_week_start_date and week_start_date in state.week_plans:
        return state
    new_state = state.clone()
    new_state.current_week_start_date = week_start_date
    ensure_plan(new_state.week_plans, week_start_date)
    return new_state


def shift_week(state: PlannerState, delta: int) -> PlannerState:
    """Move the current week pointer by whole weeks; the target plan always exists afterwards."""
    return _move_to(state, shift_week_start(state.current_week_start_date, delta))


def set_week(state: PlannerState, week_start_date: str) -> PlannerState:
    """Jump to the week containing ``week_start_date`` (normalized to its Monday)."""
    day = parse_iso_date(week_start_date)
    if day is None:
        return state
    return _move_to(state, to_iso_date(start_of_week_monday(day)))
