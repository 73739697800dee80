"""
AI Workout Routes - workout generation, saved workouts and the generator wizard.
"""
from fastapi import APIRouter, Depends, HTTPException
from auth import get_current_user, require_trainer, CurrentSession
from models import GenerateWorkoutRequest, WizardGoalsStep, WizardConstraintsStep
from models_orm import UserORM
from service_modules.ai_workout_service import AIWorkoutService, get_ai_workout_service
from service_modules.client_service import client_service
from service_modules.generator_wizard import GeneratorWizardService, get_generator_wizard_service
import logging

logger = logging.getLogger("stheneco")
router = APIRouter()


@router.post("/api/generate-ai-workout")
async def generate_ai_workout(
    request: GenerateWorkoutRequest,
    service: AIWorkoutService = Depends(get_ai_workout_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Generate and store a workout for the caller, or for one of a trainer's clients."""
    target_user = request.userId or current_user.id
    is_trainer = CurrentSession(current_user).is_trainer()

    if target_user != current_user.id:
        if not is_trainer or not client_service.is_client_of(current_user.id, target_user):
            raise HTTPException(status_code=403, detail="You can only generate workouts for yourself or your clients")

    trainer_id = current_user.id if is_trainer else None
    workout = service.generate(request.goals.model_dump(), target_user, trainer_id)
    return {"workout": workout}


@router.get("/api/ai-workouts")
async def get_my_ai_workouts(
    service: AIWorkoutService = Depends(get_ai_workout_service),
    current_user: UserORM = Depends(get_current_user)
):
    return service.get_user_workouts(current_user.id)


@router.get("/api/trainer/ai-workouts")
async def get_trainer_ai_workouts(
    service: AIWorkoutService = Depends(get_ai_workout_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Workouts the trainer generated for clients."""
    require_trainer(current_user)
    return service.get_trainer_workouts(current_user.id)


@router.get("/api/ai-workouts/{workout_id}")
async def get_ai_workout(
    workout_id: str,
    service: AIWorkoutService = Depends(get_ai_workout_service),
    current_user: UserORM = Depends(get_current_user)
):
    workout = service.get_workout(workout_id)
    if not workout or current_user.id not in (workout["user_id"], workout["trainer_id"]):
        raise HTTPException(status_code=404, detail="Workout not found")
    return workout


@router.delete("/api/ai-workouts/{workout_id}")
async def delete_ai_workout(
    workout_id: str,
    service: AIWorkoutService = Depends(get_ai_workout_service),
    current_user: UserORM = Depends(get_current_user)
):
    return service.delete_workout(workout_id, current_user.id)


# --- GENERATOR WIZARD ---

@router.get("/api/workout-generator/options")
async def get_generator_options(
    service: GeneratorWizardService = Depends(get_generator_wizard_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Goal, equipment and muscle-group choices, plus the roster for trainers."""
    options = service.get_options()
    if CurrentSession(current_user).is_trainer():
        options["clients"] = [
            {"id": c["client_id"], "name": c["client"]["name"], "level": c["client"]["fitness_level"]}
            for c in client_service.get_trainer_clients(current_user.id, status="active")
        ]
    return options


@router.get("/api/workout-generator")
async def get_wizard_state(
    service: GeneratorWizardService = Depends(get_generator_wizard_service),
    current_user: UserORM = Depends(get_current_user)
):
    return service.get_state(current_user.id, CurrentSession(current_user).is_trainer())


@router.post("/api/workout-generator/start")
async def start_wizard(
    service: GeneratorWizardService = Depends(get_generator_wizard_service),
    current_user: UserORM = Depends(get_current_user)
):
    return service.start(current_user.id, CurrentSession(current_user).is_trainer())


@router.post("/api/workout-generator/goals")
async def set_wizard_goals(
    data: WizardGoalsStep,
    service: GeneratorWizardService = Depends(get_generator_wizard_service),
    current_user: UserORM = Depends(get_current_user)
):
    return service.set_goals(current_user.id, CurrentSession(current_user).is_trainer(), data.model_dump())


@router.post("/api/workout-generator/constraints")
async def set_wizard_constraints(
    data: WizardConstraintsStep,
    service: GeneratorWizardService = Depends(get_generator_wizard_service),
    current_user: UserORM = Depends(get_current_user)
):
    return service.set_constraints(current_user.id, CurrentSession(current_user).is_trainer(), data.model_dump())


@router.post("/api/workout-generator/generate")
async def run_wizard_generation(
    service: GeneratorWizardService = Depends(get_generator_wizard_service),
    current_user: UserORM = Depends(get_current_user)
):
    return service.generate(current_user.id, CurrentSession(current_user).is_trainer())


@router.post("/api/workout-generator/accept")
async def accept_wizard_workout(
    service: GeneratorWizardService = Depends(get_generator_wizard_service),
    current_user: UserORM = Depends(get_current_user)
):
    return service.accept(current_user.id, CurrentSession(current_user).is_trainer())


@router.post("/api/workout-generator/reject")
async def reject_wizard_workout(
    service: GeneratorWizardService = Depends(get_generator_wizard_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Discard the draft (deleting its stored record) and return to step 2."""
    return service.reject(current_user.id, CurrentSession(current_user).is_trainer())


@router.post("/api/workout-generator/restart")
async def restart_wizard(
    service: GeneratorWizardService = Depends(get_generator_wizard_service),
    current_user: UserORM = Depends(get_current_user)
):
    return service.restart(current_user.id, CurrentSession(current_user).is_trainer())
