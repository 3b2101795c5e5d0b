from fastapi import (
    FastAPI,
    Request,
    Query,
    APIRouter,
    Depends,
    Body
)
from typing import Any, Dict, Optional
import logging

from planner.api.deps import get_session, state_view, command_result
from planner.api.routes import inventory, catalog, plan
from planner.events.web_observers import EventRecorder
from planner.infra.State_Repository import StateRepository
from planner.logic.importing.state_io import export_state, import_state, reset_demo_data
from planner.logic.session import PlannerSession

# Logging
logger = logging.getLogger("planner_app")

router = APIRouter(prefix="/api")


@router.get("/state")
def get_state(session: PlannerSession = Depends(get_session)):
    return state_view(session)


@router.get("/export")
def export(session: PlannerSession = Depends(get_session)):
    return export_state(session.state)


@router.post("/import")
def import_payload(payload: Dict[str, Any] = Body(...), session: PlannerSession = Depends(get_session)):
    """Replace the whole state with a backup; an invalid payload leaves it unchanged."""
    applied = session.dispatch(import_state, payload)
    if not applied:
        logger.warning("Rejected state import")
    return command_result(session, applied)


@router.post("/reset-demo")
def reset_demo(session: PlannerSession = Depends(get_session)):
    return command_result(session, session.dispatch(reset_demo_data))


@router.post("/undo")
def undo(session: PlannerSession = Depends(get_session)):
    return command_result(session, session.undo())


@router.post("/redo")
def redo(session: PlannerSession = Depends(get_session)):
    return command_result(session, session.redo())


@router.get("/events")
def get_events(request: Request, since: Optional[int] = Query(default=None)):
    return request.app.state.events.get_events(since)


def create_app(session: Optional[PlannerSession] = None) -> FastAPI:
    """Build the HTTP app around one planner session (the file-backed one by default)."""
    app = FastAPI(title="Meal Planner State Engine API")
    app.state.session = session or PlannerSession.open(StateRepository())
    app.state.events = EventRecorder().attach(app.state.session.event_bus)

    # Include routers
    app.include_router(router)
    app.include_router(inventory.router)
    app.include_router(catalog.router)
    app.include_router(plan.router)

    @app.on_event("startup")
    def announce_expiring():
        app.state.session.announce_expiring()
        logger.info(f"Planner API ready (week {app.state.session.state.current_week_start_date})")

    return app


app = create_app()
