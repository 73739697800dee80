"""
Chat Routes - coach chat proxy. Always answers 200 with a reply string.
"""
from fastapi import APIRouter, Depends
from auth import get_current_user
from models import ChatRequest, ChatMessage
from models_orm import UserORM
from service_modules.chat_service import ChatService, get_chat_service

router = APIRouter()


@router.post("/api/chat")
async def send_chat_message(
    request: ChatRequest,
    service: ChatService = Depends(get_chat_service),
    current_user: UserORM = Depends(get_current_user)
):
    messages = [m.model_dump() for m in request.messages]
    return {"response": service.send_chat_message(messages, request.config.model_dump())}


@router.post("/api/chat/fallback")
async def chat_fallback(
    message: ChatMessage,
    service: ChatService = Depends(get_chat_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Keyword-matched canned reply."""
    return {"response": service.fallback_response(message.content)}


@router.post("/api/chat/workout-description")
async def describe_workout(
    workout: dict,
    service: ChatService = Depends(get_chat_service),
    current_user: UserORM = Depends(get_current_user)
):
    return {"description": service.generate_workout_description(workout)}
