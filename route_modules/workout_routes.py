"""
Workout Routes - API endpoints for the program library.
"""
from fastapi import APIRouter, Depends
from typing import Optional
from auth import get_current_user, require_trainer, CurrentSession
from models import ProgramCreate, WorkoutCreate
from models_orm import UserORM
from service_modules.workout_service import WorkoutService, get_workout_service

router = APIRouter()


@router.get("/api/programs")
async def get_programs(
    search: Optional[str] = None,
    category: Optional[str] = None,
    level: Optional[str] = None,
    service: WorkoutService = Depends(get_workout_service),
    current_user: UserORM = Depends(get_current_user)
):
    """List active programs, newest first."""
    return service.get_programs(search, category, level)


@router.get("/api/programs/{program_id}")
async def get_program(
    program_id: str,
    service: WorkoutService = Depends(get_workout_service),
    current_user: UserORM = Depends(get_current_user)
):
    return service.get_program(program_id)


@router.get("/api/programs/{program_id}/workouts")
async def get_program_workouts(
    program_id: str,
    service: WorkoutService = Depends(get_workout_service),
    current_user: UserORM = Depends(get_current_user)
):
    service.get_program(program_id)
    return service.get_program_workouts(program_id)


@router.post("/api/programs")
async def create_program(
    program: ProgramCreate,
    service: WorkoutService = Depends(get_workout_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Create a new program (trainers only)."""
    require_trainer(current_user)
    return service.create_program(program.model_dump(), current_user.id)


@router.post("/api/programs/{program_id}/workouts")
async def add_workout(
    program_id: str,
    workout: WorkoutCreate,
    service: WorkoutService = Depends(get_workout_service),
    current_user: UserORM = Depends(get_current_user)
):
    require_trainer(current_user)
    return service.add_workout(program_id, workout.model_dump(), current_user.id)


@router.post("/api/programs/{program_id}/start")
async def start_program(
    program_id: str,
    service: WorkoutService = Depends(get_workout_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Resolve the first workout of a program, enforcing the premium gate."""
    has_subscription = CurrentSession(current_user).has_active_subscription()
    return service.start_program(program_id, has_subscription)
