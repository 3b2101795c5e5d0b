"""Week navigation, slot commands and week reports."""
from fastapi import APIRouter, Depends

from planner.api.deps import get_session, command_result
from planner.logic import consumption
from planner.logic.grid.addressing import shift_week, set_week
from planner.logic.reporting.grid_export import build_week_grid_payload
from planner.logic.reporting.nutrition import compute_week_nutrition
from planner.logic.session import PlannerSession
from planner.utilities.constants import DAY_NAMES, MEAL_LABELS, MEAL_TYPES
from planner.utilities.dates import to_iso_date
from planner.utilities.validators import (
    WeekShiftInput, WeekSetInput, DropIngredientInput, DropMealInput, SlotInput, SlotPairInput,
    ServingsInput, SaveAsMealInput
)

router = APIRouter(prefix="/api")


# -------------------- Week --------------------
@router.get("/week")
def get_week(session: PlannerSession = Depends(get_session)):
    state = session.state
    plan = state.current_plan()
    return {
        "weekStartDate": state.current_week_start_date,
        "mealTypes": list(MEAL_TYPES),
        "mealLabels": MEAL_LABELS,
        "dayNames": list(DAY_NAMES),
        "plan": plan.to_dict() if plan else None,
    }


@router.post("/week/shift")
def move_week(body: WeekShiftInput, session: PlannerSession = Depends(get_session)):
    session.navigate(shift_week, body.delta)
    return get_week(session)


@router.post("/week/set")
def jump_to_week(body: WeekSetInput, session: PlannerSession = Depends(get_session)):
    session.navigate(set_week, to_iso_date(body.week_start_date))
    return get_week(session)


@router.get("/nutrition")
def week_nutrition(session: PlannerSession = Depends(get_session)):
    return compute_week_nutrition(session.state)


@router.get("/export/grid")
def export_grid(session: PlannerSession = Depends(get_session)):
    return build_week_grid_payload(session.state)


# -------------------- Slots --------------------
@router.post("/slots/drop-ingredient")
def drop_ingredient(body: DropIngredientInput, session: PlannerSession = Depends(get_session)):
    applied = session.dispatch(consumption.drop_ingredient, body.address.to_address(), body.ingredient_id)
    return command_result(session, applied)


@router.post("/slots/drop-meal")
def drop_meal(body: DropMealInput, session: PlannerSession = Depends(get_session)):
    applied = session.dispatch(consumption.drop_meal, body.address.to_address(), body.meal_id)
    return command_result(session, applied)


@router.post("/slots/move")
def move_or_swap(body: SlotPairInput, session: PlannerSession = Depends(get_session)):
    applied = session.dispatch(consumption.move_or_swap, body.source.to_address(), body.target.to_address())
    return command_result(session, applied)


@router.post("/slots/duplicate")
def duplicate(body: SlotPairInput, session: PlannerSession = Depends(get_session)):
    applied = session.dispatch(consumption.duplicate_slot, body.source.to_address(), body.target.to_address())
    return command_result(session, applied)


@router.post("/slots/clear")
def clear(body: SlotInput, session: PlannerSession = Depends(get_session)):
    return command_result(session, session.dispatch(consumption.clear_slot, body.address.to_address()))


@router.post("/slots/remove-to-inventory")
def remove_to_inventory(body: SlotInput, session: PlannerSession = Depends(get_session)):
    return command_result(session, session.dispatch(consumption.remove_to_inventory, body.address.to_address()))


@router.post("/slots/leftovers")
def make_leftovers(body: SlotInput, session: PlannerSession = Depends(get_session)):
    return command_result(session, session.dispatch(consumption.make_leftovers, body.address.to_address()))


@router.post("/slots/servings")
def set_servings(body: ServingsInput, session: PlannerSession = Depends(get_session)):
    applied = session.dispatch(consumption.set_servings, body.address.to_address(), body.servings)
    return command_result(session, applied)


@router.post("/slots/save-as-meal")
def save_as_meal(body: SaveAsMealInput, session: PlannerSession = Depends(get_session)):
    applied = session.dispatch(consumption.save_slot_as_meal, body.address.to_address(), body.name)
    return command_result(session, applied)
