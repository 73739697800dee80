"""
Base service utilities and shared imports.
All services should import from here for common functionality.
"""
from fastapi import HTTPException
import uuid
import json
import logging
from datetime import date, datetime, timedelta

from database import get_db_session, Base, engine
from models_orm import (
    UserORM, WorkoutProgramORM, WorkoutORM, UserProgressORM,
    AIGeneratedWorkoutORM, FormAnalysisORM, TrainerClientORM
)

# Re-export for convenience
__all__ = [
    'HTTPException', 'uuid', 'json', 'logging', 'date', 'datetime', 'timedelta',
    'get_db_session', 'Base', 'engine',
    'UserORM', 'WorkoutProgramORM', 'WorkoutORM', 'UserProgressORM',
    'AIGeneratedWorkoutORM', 'FormAnalysisORM', 'TrainerClientORM',
    'load_json', 'user_to_dict', 'load_settings', 'save_settings'
]

logger = logging.getLogger("stheneco")


def load_json(raw, default=None):
    """Decode a JSON text column, falling back to `default` on empty or bad data."""
    if default is None:
        default = []
    if not raw:
        return default
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        logger.warning(f"Could not decode JSON column value: {raw[:50]!r}")
        return default


def user_to_dict(user: UserORM) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "user_role": user.user_role,
        "subscription_tier": user.subscription_tier or "free",
        "subscription_status": user.subscription_status or "active",
        "created_at": user.created_at,
        "fitness_level": user.fitness_level,
        "fitness_goals": load_json(user.fitness_goals),
        "specialty": user.specialty,
        "avatar_url": user.avatar_url,
        "bio": user.bio,
        "experience_years": user.experience_years,
        "certifications": load_json(user.certifications),
        "hourly_rate": user.hourly_rate,
    }


def load_settings(user: UserORM) -> dict:
    return load_json(user.settings, default={})


def save_settings(user: UserORM, settings: dict):
    user.settings = json.dumps(settings)
    user.updated_at = datetime.utcnow().isoformat()
