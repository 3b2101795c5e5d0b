"""Meal template and profile routes."""
from fastapi import APIRouter, Depends, HTTPException

from planner.api.deps import get_session, command_result
from planner.domain.Profile import LastProfileError
from planner.logic.inventory import commands
from planner.logic.session import PlannerSession
from planner.utilities.validators import MealInput, MealPatch, PinnedMoveInput, ProfileInput, ProfilePatch

router = APIRouter(prefix="/api")


@router.post("/meals")
def add_meal(body: MealInput, session: PlannerSession = Depends(get_session)):
    data = body.model_dump()
    return command_result(session, session.dispatch(commands.add_meal, **data))


@router.patch("/meals/{meal_id}")
def update_meal(meal_id: str, body: MealPatch, session: PlannerSession = Depends(get_session)):
    patch = body.model_dump(exclude_unset=True)
    return command_result(session, session.dispatch(commands.update_meal, meal_id, **patch))


@router.delete("/meals/{meal_id}")
def delete_meal(meal_id: str, session: PlannerSession = Depends(get_session)):
    return command_result(session, session.dispatch(commands.delete_meal, meal_id))


@router.post("/meals/{meal_id}/pin")
def pin_meal(meal_id: str, session: PlannerSession = Depends(get_session)):
    return command_result(session, session.dispatch(commands.toggle_meal_pinned, meal_id))


@router.post("/meals/{meal_id}/move")
def move_pinned_meal(meal_id: str, body: PinnedMoveInput, session: PlannerSession = Depends(get_session)):
    return command_result(session, session.dispatch(commands.move_pinned_meal, meal_id, body.direction))


@router.post("/profiles")
def add_profile(body: ProfileInput, session: PlannerSession = Depends(get_session)):
    data = body.model_dump()
    name = data.pop("name")
    return command_result(session, session.dispatch(commands.add_profile, name, **data))


@router.patch("/profiles/{profile_id}")
def update_profile(profile_id: str, body: ProfilePatch, session: PlannerSession = Depends(get_session)):
    patch = body.model_dump(exclude_unset=True)
    return command_result(session, session.dispatch(commands.update_profile, profile_id, **patch))


@router.delete("/profiles/{profile_id}")
def delete_profile(profile_id: str, session: PlannerSession = Depends(get_session)):
    try:
        applied = session.dispatch(commands.delete_profile, profile_id)
    except LastProfileError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return command_result(session, applied)
