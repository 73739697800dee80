"""
Session Routes - drive an in-progress workout session.
"""
from fastapi import APIRouter, Depends
from auth import get_current_user
from models import SessionCreate, SessionTick, SessionSummary
from models_orm import UserORM
from service_modules.session_player import SessionPlayerService, get_session_player_service

router = APIRouter()


@router.post("/api/sessions")
async def create_session(
    data: SessionCreate,
    service: SessionPlayerService = Depends(get_session_player_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Load a workout into a new player (not started)."""
    return service.create_session(data.workout_id, current_user.id)


@router.get("/api/sessions/{session_id}")
async def get_session(
    session_id: str,
    service: SessionPlayerService = Depends(get_session_player_service),
    current_user: UserORM = Depends(get_current_user)
):
    player = service.get_player(session_id, current_user.id)
    return {"session_id": session_id, **player.to_dict()}


@router.post("/api/sessions/{session_id}/tick")
async def tick_session(
    session_id: str,
    data: SessionTick,
    service: SessionPlayerService = Depends(get_session_player_service),
    current_user: UserORM = Depends(get_current_user)
):
    return service.perform(session_id, current_user.id, "tick", seconds=data.seconds)


@router.post("/api/sessions/{session_id}/{action}")
async def session_action(
    session_id: str,
    action: str,
    service: SessionPlayerService = Depends(get_session_player_service),
    current_user: UserORM = Depends(get_current_user)
):
    """start, pause, resume, skip_rest, complete_set, skip or restart."""
    return service.perform(session_id, current_user.id, action)


@router.delete("/api/sessions/{session_id}", response_model=SessionSummary)
async def end_session(
    session_id: str,
    service: SessionPlayerService = Depends(get_session_player_service),
    current_user: UserORM = Depends(get_current_user)
):
    return service.end_session(session_id, current_user.id)
