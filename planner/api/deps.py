"""Shared helpers for the HTTP routers: session lookup and command responses."""
from fastapi import Request

from planner.logic.importing.state_io import export_state
from planner.logic.session import PlannerSession


def get_session(request: Request) -> PlannerSession:
    return request.app.state.session


def state_view(session: PlannerSession) -> dict:
    state = session.state
    data = export_state(state)
    data["inventorySort"] = state.inventory_sort
    data["history"] = session.history.status()
    return data


def command_result(session: PlannerSession, applied: bool) -> dict:
    return {"applied": applied, "state": state_view(session)}
