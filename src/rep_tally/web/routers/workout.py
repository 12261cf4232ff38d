"""Live session routes."""

from fastapi import APIRouter, HTTPException, Request

from ...engine.events import EngineEvent
from ...services import TrackerService

router = APIRouter(prefix="/workout", tags=["workout"])


def get_tracker(request: Request) -> TrackerService:
    """Get the tracker from app state."""
    return request.app.state.tracker


def _response(tracker: TrackerService, events: list[EngineEvent] | None = None) -> dict:
    body = tracker.engine.summary()
    if events is not None:
        body["events"] = [e.to_dict() for e in events]
    return body


@router.get("")
async def get_workout(request: Request):
    """Current session, timers and aggregates."""
    return _response(get_tracker(request))


@router.post("/increment")
async def increment(request: Request):
    tracker = get_tracker(request)
    return _response(tracker, await tracker.increment())


@router.post("/decrement")
async def decrement(request: Request):
    tracker = get_tracker(request)
    return _response(tracker, await tracker.decrement())


@router.post("/quick-add/{amount}")
async def quick_add(request: Request, amount: int):
    if amount < 1 or amount > 1000:
        raise HTTPException(status_code=422, detail="amount must be between 1 and 1000")
    tracker = get_tracker(request)
    return _response(tracker, await tracker.quick_add(amount))


@router.post("/reset-session")
async def reset_session(request: Request):
    """Finish the session and record it in the history."""
    tracker = get_tracker(request)
    return _response(tracker, await tracker.reset_session())


@router.post("/reset-all")
async def reset_all(request: Request):
    tracker = get_tracker(request)
    return _response(tracker, await tracker.reset_all())


@router.post("/timer/toggle")
async def toggle_timer(request: Request):
    """Start or pause the timer selected by the timer mode."""
    tracker = get_tracker(request)
    running = await tracker.toggle_active_timer()
    body = _response(tracker)
    body["running"] = running
    return body


@router.post("/rest/start")
async def start_rest(request: Request):
    tracker = get_tracker(request)
    tracker.engine.start_rest()
    return _response(tracker)


@router.post("/rest/stop")
async def stop_rest(request: Request):
    tracker = get_tracker(request)
    tracker.engine.stop_rest()
    return _response(tracker)


@router.get("/events")
async def drain_events(request: Request):
    """Events raised since the last call, oldest first."""
    tracker = get_tracker(request)
    return {"events": [e.to_dict() for e in tracker.engine.drain_events()]}
