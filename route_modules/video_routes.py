"""
Video Routes - video coach credentials, trainer personas and conversations.
"""
from fastapi import APIRouter, Depends, HTTPException, Request
from auth import get_current_user
from models import VideoApiKeyRequest, ConversationConfig
from models_orm import UserORM
from service_modules.video_service import (
    VideoCoachService, get_video_service, TRAINER_CONFIGS, get_trainer_config
)
import logging

logger = logging.getLogger("stheneco")
router = APIRouter()


@router.get("/api/video/status")
async def get_video_status(
    service: VideoCoachService = Depends(get_video_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Current credential state. The first call re-validates a stored key."""
    return service.restore(current_user.id)


@router.post("/api/video/auth")
async def authenticate_video(
    data: VideoApiKeyRequest,
    service: VideoCoachService = Depends(get_video_service),
    current_user: UserORM = Depends(get_current_user)
):
    return service.authenticate(current_user.id, data.api_key)


@router.post("/api/video/test-mode/toggle")
async def toggle_test_mode(
    service: VideoCoachService = Depends(get_video_service),
    current_user: UserORM = Depends(get_current_user)
):
    return service.toggle_test_mode(current_user.id)


@router.post("/api/video/logout")
async def logout_video(
    service: VideoCoachService = Depends(get_video_service),
    current_user: UserORM = Depends(get_current_user)
):
    return service.logout(current_user.id)


@router.get("/api/video/trainers")
async def get_trainers(current_user: UserORM = Depends(get_current_user)):
    return [{"key": key, **config} for key, config in TRAINER_CONFIGS.items()]


@router.get("/api/video/trainers/{replica_id}")
async def get_trainer(replica_id: str, current_user: UserORM = Depends(get_current_user)):
    config = get_trainer_config(replica_id)
    if not config:
        raise HTTPException(status_code=404, detail="Trainer not found")
    return config


@router.post("/api/video/conversations")
async def create_conversation(
    config: ConversationConfig,
    service: VideoCoachService = Depends(get_video_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Start a conversation; the client joins the returned URL."""
    return service.create_conversation(current_user.id, config.model_dump())


@router.get("/api/video/conversations/{conversation_id}")
async def get_conversation(
    conversation_id: str,
    service: VideoCoachService = Depends(get_video_service),
    current_user: UserORM = Depends(get_current_user)
):
    conversation = service.get_conversation(current_user.id, conversation_id)
    if conversation is None:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return conversation


@router.delete("/api/video/conversations/{conversation_id}")
async def end_conversation(
    conversation_id: str,
    service: VideoCoachService = Depends(get_video_service),
    current_user: UserORM = Depends(get_current_user)
):
    return service.end_conversation(current_user.id, conversation_id)


@router.post("/api/video/webhook")
async def video_webhook(request: Request):
    """Conversation callbacks from the video vendor. Logged only."""
    payload = await request.json()
    logger.info(f"Video webhook: {payload.get('event_type')} for {payload.get('conversation_id')}")
    return {"status": "success"}
