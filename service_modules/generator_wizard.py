"""
Workout Generator Wizard - four-step flow around workout generation.

Step 1 collects goals, step 2 equipment and constraints and runs the
generator, step 3 reviews the stored draft and step 4 confirms it was kept.
Wizard state is held in memory per user.
"""
from .base import HTTPException, logging
from .ai_workout_service import ai_workout_service
from .client_service import client_service

logger = logging.getLogger("stheneco")

STEP_GOALS = 1
STEP_CONSTRAINTS = 2
STEP_REVIEW = 3
STEP_SAVED = 4

PRIMARY_GOALS = [
    "Build Muscle", "Lose Weight", "Improve Strength", "Increase Endurance",
    "Better Flexibility", "Athletic Performance", "General Fitness",
]
WORKOUT_TYPES = ("strength", "cardio", "hiit", "flexibility", "mixed")
EQUIPMENT_OPTIONS = [
    "bodyweight", "dumbbells", "resistance bands", "kettlebells",
    "barbell", "exercise ball", "pull-up bar", "yoga mat",
]
TARGET_MUSCLE_GROUPS = ["chest", "back", "shoulders", "arms", "core", "legs", "glutes"]
FITNESS_LEVELS = ("beginner", "intermediate", "advanced")


def default_goals() -> dict:
    return {
        "primary": "",
        "secondary": [],
        "timeAvailable": 30,
        "fitnessLevel": "intermediate",
        "equipment": ["bodyweight"],
        "targetMuscles": [],
        "workoutType": "mixed",
    }


class GeneratorWizard:
    def __init__(self, user_id: str, is_trainer: bool):
        self.user_id = user_id
        self.is_trainer = is_trainer
        self.reset()

    def reset(self):
        self.step = STEP_GOALS
        self.goals = default_goals()
        self.client_id = None
        self.workout = None

    def require_step(self, step: int):
        if self.step != step:
            raise HTTPException(
                status_code=409,
                detail=f"This action is not available at step {self.step} of the workout generator"
            )

    def to_dict(self) -> dict:
        return {
            "step": self.step,
            "goals": dict(self.goals),
            "client_id": self.client_id,
            "workout": self.workout,
        }


class GeneratorWizardService:
    """Drives one wizard per user on top of the workout generator."""

    def __init__(self):
        self._wizards = {}

    def get_options(self) -> dict:
        return {
            "primaryGoals": PRIMARY_GOALS,
            "workoutTypes": list(WORKOUT_TYPES),
            "equipment": EQUIPMENT_OPTIONS,
            "targetMuscles": TARGET_MUSCLE_GROUPS,
            "fitnessLevels": list(FITNESS_LEVELS),
        }

    def _get(self, user_id: str, is_trainer: bool) -> GeneratorWizard:
        wizard = self._wizards.get(user_id)
        if wizard is None:
            wizard = GeneratorWizard(user_id, is_trainer)
            self._wizards[user_id] = wizard
        return wizard

    def start(self, user_id: str, is_trainer: bool) -> dict:
        wizard = GeneratorWizard(user_id, is_trainer)
        self._wizards[user_id] = wizard
        return wizard.to_dict()

    def get_state(self, user_id: str, is_trainer: bool) -> dict:
        return self._get(user_id, is_trainer).to_dict()

    def set_goals(self, user_id: str, is_trainer: bool, data: dict) -> dict:
        wizard = self._get(user_id, is_trainer)
        wizard.require_step(STEP_GOALS)

        primary = (data.get("primary") or "").strip()
        if not primary:
            raise HTTPException(status_code=400, detail="Please select a primary goal")
        workout_type = data.get("workoutType") or "mixed"
        if workout_type not in WORKOUT_TYPES:
            raise HTTPException(status_code=400, detail=f"Invalid workout type. Must be one of: {', '.join(WORKOUT_TYPES)}")

        client_id = data.get("clientId")
        if client_id:
            if not wizard.is_trainer:
                raise HTTPException(status_code=403, detail="Only trainers can generate workouts for clients")
            if not client_service.is_client_of(user_id, client_id):
                raise HTTPException(status_code=404, detail="Selected client is not on your roster")

        wizard.goals["primary"] = primary
        wizard.goals["workoutType"] = workout_type
        wizard.goals["secondary"] = list(data.get("secondary") or [])
        wizard.client_id = client_id or None
        wizard.step = STEP_CONSTRAINTS
        return wizard.to_dict()

    def set_constraints(self, user_id: str, is_trainer: bool, data: dict) -> dict:
        wizard = self._get(user_id, is_trainer)
        wizard.require_step(STEP_CONSTRAINTS)

        equipment = list(data.get("equipment") or [])
        if not equipment:
            raise HTTPException(status_code=400, detail="Select at least one equipment option")
        time_available = data.get("timeAvailable") or wizard.goals["timeAvailable"]
        if time_available <= 0:
            raise HTTPException(status_code=400, detail="Time available must be positive")
        level = data.get("fitnessLevel") or wizard.goals["fitnessLevel"]
        if level not in FITNESS_LEVELS:
            raise HTTPException(status_code=400, detail=f"Invalid fitness level. Must be one of: {', '.join(FITNESS_LEVELS)}")

        wizard.goals["equipment"] = equipment
        wizard.goals["timeAvailable"] = time_available
        wizard.goals["fitnessLevel"] = level
        wizard.goals["targetMuscles"] = list(data.get("targetMuscles") or [])
        return wizard.to_dict()

    def generate(self, user_id: str, is_trainer: bool) -> dict:
        wizard = self._get(user_id, is_trainer)
        wizard.require_step(STEP_CONSTRAINTS)

        target_user = wizard.client_id or user_id
        trainer_id = user_id if wizard.is_trainer else None
        logger.info(f"Wizard generating workout for {target_user} (trainer: {trainer_id})")

        wizard.workout = ai_workout_service.generate(dict(wizard.goals), target_user, trainer_id)
        wizard.step = STEP_REVIEW
        return wizard.to_dict()

    def accept(self, user_id: str, is_trainer: bool) -> dict:
        wizard = self._get(user_id, is_trainer)
        wizard.require_step(STEP_REVIEW)
        # Already stored at generation time
        wizard.step = STEP_SAVED
        return wizard.to_dict()

    def reject(self, user_id: str, is_trainer: bool) -> dict:
        wizard = self._get(user_id, is_trainer)
        wizard.require_step(STEP_REVIEW)

        if wizard.workout and wizard.workout.get("id"):
            ai_workout_service.delete_workout(wizard.workout["id"], user_id)
        wizard.workout = None
        wizard.step = STEP_CONSTRAINTS
        return wizard.to_dict()

    def restart(self, user_id: str, is_trainer: bool) -> dict:
        wizard = self._get(user_id, is_trainer)
        wizard.reset()
        return wizard.to_dict()


# Singleton instance
generator_wizard_service = GeneratorWizardService()

def get_generator_wizard_service() -> GeneratorWizardService:
    """Dependency injection helper."""
    return generator_wizard_service
