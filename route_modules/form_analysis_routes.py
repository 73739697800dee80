"""
Form Analysis Routes - canned exercise feedback for subscribers.
"""
from fastapi import APIRouter, Depends
from auth import get_current_user, CurrentSession
from models import FormAnalysisRequest
from models_orm import UserORM
from service_modules.form_analysis_service import FormAnalysisService, get_form_analysis_service

router = APIRouter()


@router.get("/api/form-analysis/exercises")
async def get_exercises(
    service: FormAnalysisService = Depends(get_form_analysis_service),
    current_user: UserORM = Depends(get_current_user)
):
    return service.get_exercises()


@router.post("/api/form-analysis")
async def analyze_form(
    request: FormAnalysisRequest,
    service: FormAnalysisService = Depends(get_form_analysis_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Analysis for subscribers, an upgrade prompt for everyone else."""
    has_subscription = CurrentSession(current_user).has_active_subscription()
    return service.analyze_for_user(current_user.id, request.exercise, has_subscription)


@router.get("/api/form-analysis/history")
async def get_history(
    service: FormAnalysisService = Depends(get_form_analysis_service),
    current_user: UserORM = Depends(get_current_user)
):
    return service.history(current_user.id)
