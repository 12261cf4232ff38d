"""History and achievement routes."""

from fastapi import APIRouter, HTTPException, Request

from .workout import get_tracker

router = APIRouter(tags=["history"])


@router.get("/history")
async def list_history(request: Request, limit: int = 50):
    """Completed sessions, most recent first."""
    tracker = get_tracker(request)
    return {"sessions": [s.to_dict() for s in tracker.engine.history[:limit]]}


@router.delete("/history/{session_id}")
async def delete_session(request: Request, session_id: str):
    tracker = get_tracker(request)
    if not await tracker.delete_session(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return {"status": "deleted", "id": session_id}


@router.get("/achievements")
async def list_achievements(request: Request):
    engine = get_tracker(request).engine
    return {
        "achievements": [a.to_dict() for a in engine.achievements],
        "unlocked": engine.unlocked_count,
        "has_new_achievement": engine.has_new_achievement,
    }


@router.post("/achievements/seen")
async def mark_achievements_seen(request: Request):
    """Clear the new-achievement badge."""
    engine = get_tracker(request).engine
    engine.clear_new_achievement()
    return {"has_new_achievement": engine.has_new_achievement}
