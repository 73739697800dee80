"""
Progress Routes - completed workouts and progress statistics.
"""
from fastapi import APIRouter, Depends, Query
from typing import Optional
from auth import get_current_user
from models import ProgressCreate
from models_orm import UserORM
from service_modules.progress_service import ProgressService, get_progress_service

router = APIRouter()


@router.post("/api/progress")
async def record_progress(
    data: ProgressCreate,
    service: ProgressService = Depends(get_progress_service),
    current_user: UserORM = Depends(get_current_user)
):
    return service.record_completion(current_user.id, data.model_dump())


@router.get("/api/progress")
async def get_progress(
    program_id: Optional[str] = None,
    service: ProgressService = Depends(get_progress_service),
    current_user: UserORM = Depends(get_current_user)
):
    return service.get_user_progress(current_user.id, program_id=program_id)


@router.get("/api/progress/stats")
async def get_progress_stats(
    days: int = Query(30, ge=1, le=365),
    service: ProgressService = Depends(get_progress_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Totals for the last `days` days plus weekly buckets."""
    return service.get_stats(current_user.id, days=days)
