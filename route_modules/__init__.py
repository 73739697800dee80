"""
Routes package - organized API routes.

This package provides modular route definitions.
Import the combined router for use in main.py.
"""
from fastapi import APIRouter

from .auth_routes import router as auth_router
from .profile_routes import router as profile_router
from .workout_routes import router as workout_router
from .progress_routes import router as progress_router
from .ai_workout_routes import router as ai_workout_router
from .chat_routes import router as chat_router
from .session_routes import router as session_router
from .form_analysis_routes import router as form_analysis_router
from .video_routes import router as video_router
from .client_routes import router as client_router
from .subscription_routes import router as subscription_router

# Combined router that includes all sub-routers
combined_router = APIRouter()
combined_router.include_router(auth_router, tags=["auth"])
combined_router.include_router(profile_router, tags=["profile"])
combined_router.include_router(workout_router, tags=["programs"])
combined_router.include_router(progress_router, tags=["progress"])
combined_router.include_router(ai_workout_router, tags=["ai-workouts"])
combined_router.include_router(chat_router, tags=["chat"])
combined_router.include_router(session_router, tags=["sessions"])
combined_router.include_router(form_analysis_router, tags=["form-analysis"])
combined_router.include_router(video_router, tags=["video"])
combined_router.include_router(client_router, tags=["clients"])
combined_router.include_router(subscription_router, tags=["subscriptions"])

__all__ = [
    'combined_router', 'auth_router', 'profile_router', 'workout_router', 'progress_router',
    'ai_workout_router', 'chat_router', 'session_router', 'form_analysis_router',
    'video_router', 'client_router', 'subscription_router'
]
