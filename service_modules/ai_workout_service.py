"""
AI Workout Service - drafts a workout document with the LLM and stores it.

Generation never fails because of the LLM: a missing key, an upstream error
or an unparsable reply all fall back to the basic template workout, which is
saved like any other.
"""
from .base import (
    HTTPException, uuid, json, logging, datetime,
    get_db_session, AIGeneratedWorkoutORM, UserORM, load_json
)
from . import openai_client
import requests

logger = logging.getLogger("stheneco")

SYSTEM_PROMPT = (
    "You are a professional fitness trainer. Create detailed workout plans in the exact "
    "JSON format requested. Always include proper form instructions and safety notes."
)

CALORIES_PER_MINUTE = 7

BASIC_WORKOUT = {
    "warmup": [
        {"name": "Arm Circles", "sets": 1, "reps": "10 forward, 10 backward", "instructions": "Stand with arms extended, make circles", "muscleGroups": ["shoulders"]},
        {"name": "Leg Swings", "sets": 1, "reps": "10 each leg", "instructions": "Hold wall for support, swing leg front to back", "muscleGroups": ["hips"]},
        {"name": "Torso Twists", "sets": 1, "reps": "10 each direction", "instructions": "Stand with feet hip-width apart, rotate torso", "muscleGroups": ["core"]},
    ],
    "main": [
        {"name": "Push-ups", "sets": 3, "reps": "8-12", "restTime": 60, "instructions": "Start in plank, lower chest to floor, push up", "muscleGroups": ["chest", "triceps"], "modifications": {"easier": "On knees or wall", "harder": "Add clap or single arm"}},
        {"name": "Squats", "sets": 3, "reps": "10-15", "restTime": 60, "instructions": "Feet shoulder-width apart, lower as if sitting", "muscleGroups": ["quadriceps", "glutes"], "modifications": {"easier": "Use chair for support", "harder": "Add jump"}},
        {"name": "Plank", "sets": 3, "reps": "30-60 seconds", "restTime": 45, "instructions": "Hold push-up position, keep body straight", "muscleGroups": ["core"], "modifications": {"easier": "On knees", "harder": "Add leg lifts"}},
        {"name": "Lunges", "sets": 3, "reps": "8 each leg", "restTime": 60, "instructions": "Step forward, lower back knee toward ground", "muscleGroups": ["quadriceps", "glutes"], "modifications": {"easier": "Hold wall for balance", "harder": "Add jump"}},
    ],
    "cooldown": [
        {"name": "Forward Fold", "sets": 1, "reps": "30 seconds", "instructions": "Stand, slowly fold forward, let arms hang", "muscleGroups": ["hamstrings", "back"]},
        {"name": "Child's Pose", "sets": 1, "reps": "45 seconds", "instructions": "Kneel, sit back on heels, fold forward", "muscleGroups": ["back", "shoulders"]},
        {"name": "Seated Twist", "sets": 1, "reps": "30 seconds each side", "instructions": "Sit cross-legged, twist to each side", "muscleGroups": ["spine"]},
    ],
}

BASIC_NOTES = ["Listen to your body", "Maintain proper form", "Stay hydrated"]


def estimated_calories(minutes: int) -> int:
    return round(minutes * CALORIES_PER_MINUTE)


def create_workout_prompt(goals: dict) -> str:
    time_available = goals.get("timeAvailable", 30)
    primary = goals.get("primary") or "General Fitness"
    level = goals.get("fitnessLevel", "intermediate")
    target = ""
    if goals.get("targetMuscles"):
        target = f"Target muscles: {', '.join(goals['targetMuscles'])}"

    structure = {
        "title": "Workout title",
        "description": "Brief description",
        "totalDuration": time_available,
        "warmup": [{
            "name": "Exercise name", "sets": 1, "reps": "10 each side",
            "instructions": "Detailed form instructions", "muscleGroups": ["muscle1", "muscle2"],
        }],
        "mainWorkout": [{
            "name": "Exercise name", "sets": 3, "reps": "10-12", "restTime": 60,
            "instructions": "Detailed form instructions", "muscleGroups": ["muscle1", "muscle2"],
            "modifications": {"easier": "Easier variation", "harder": "Harder variation"},
        }],
        "cooldown": [{
            "name": "Exercise name", "sets": 1, "reps": "30 seconds",
            "instructions": "Detailed form instructions", "muscleGroups": ["muscle1", "muscle2"],
        }],
        "notes": ["Safety tip 1", "Safety tip 2"],
        "difficulty": level,
        "estimatedCalories": estimated_calories(time_available),
    }

    return (
        f"Create a {time_available}-minute {goals.get('workoutType', 'mixed')} workout for a {level} level person.\n\n"
        f"Primary goal: {primary}\n"
        f"Equipment available: {', '.join(goals.get('equipment') or [])}\n"
        f"{target}\n\n"
        f"Return ONLY a JSON object with this exact structure:\n"
        f"{json.dumps(structure, indent=2)}\n\n"
        f"Include 3-4 warmup exercises, 4-6 main exercises, and 3-4 cooldown exercises. "
        f"Focus on {primary.lower()}."
    )


def generate_basic_workout(goals: dict) -> dict:
    time_available = goals.get("timeAvailable", 30)
    primary = goals.get("primary") or "General Fitness"
    level = goals.get("fitnessLevel", "intermediate")
    return {
        "title": f"{time_available}-Minute {primary} Workout",
        "description": f"A {level} level workout focused on {primary.lower()}",
        "totalDuration": time_available,
        "warmup": [dict(e) for e in BASIC_WORKOUT["warmup"]],
        "mainWorkout": [dict(e) for e in BASIC_WORKOUT["main"]],
        "cooldown": [dict(e) for e in BASIC_WORKOUT["cooldown"]],
        "notes": list(BASIC_NOTES),
        "difficulty": level,
        "estimatedCalories": estimated_calories(time_available),
    }


def parse_workout_reply(content) -> dict:
    """Parse the LLM reply into a workout document, or raise ValueError."""
    if not content:
        raise ValueError("Empty AI response")
    text = content.strip()
    # Tolerate a fenced ```json block around the object
    if text.startswith("```"):
        text = text.strip("`")
        if text.lower().startswith("json"):
            text = text[4:]
    workout = json.loads(text)
    if not isinstance(workout, dict) or not workout.get("title"):
        raise ValueError("AI response is not a workout object")
    return workout


class AIWorkoutService:
    """Service for LLM-drafted workouts."""

    def _to_dict(self, w: AIGeneratedWorkoutORM) -> dict:
        return {
            "id": w.id,
            "user_id": w.user_id,
            "trainer_id": w.trainer_id,
            "title": w.title,
            "description": w.description,
            "goals": load_json(w.goals),
            "fitness_level": w.fitness_level,
            "duration_minutes": w.duration_minutes,
            "equipment_needed": load_json(w.equipment_needed),
            "workout_structure": load_json(w.workout_structure, default={}),
            "is_custom": w.is_custom,
            "created_at": w.created_at,
        }

    def draft_workout(self, goals: dict) -> dict:
        """Ask the LLM for a workout document, falling back to the basic template."""
        api_key = openai_client.get_api_key()
        if not api_key:
            logger.info("OpenAI API key not found, using basic workout generation")
            return generate_basic_workout(goals)

        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": create_workout_prompt(goals)},
        ]
        try:
            response = openai_client.chat_completion(api_key, messages, max_tokens=2000, temperature=0.7)
        except requests.RequestException as e:
            logger.warning(f"OpenAI request failed, using basic workout: {e}")
            return generate_basic_workout(goals)

        if not response.ok:
            logger.warning(f"OpenAI API error {response.status_code}, using basic workout: {response.text[:200]}")
            return generate_basic_workout(goals)

        try:
            content = openai_client.first_message_content(response.json())
            return parse_workout_reply(content)
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Failed to parse AI response, using basic workout: {e}")
            return generate_basic_workout(goals)

    def generate(self, goals: dict, user_id: str, trainer_id: str = None) -> dict:
        """Draft and store a workout. Returns the document with its new id."""
        workout = self.draft_workout(goals)
        saved = self.save_workout(workout, goals, user_id, trainer_id)
        return {**workout, "id": saved.id}

    def save_workout(self, workout: dict, goals: dict, user_id: str, trainer_id: str = None) -> AIGeneratedWorkoutORM:
        db = get_db_session()
        try:
            record = AIGeneratedWorkoutORM(
                id=str(uuid.uuid4()),
                user_id=user_id,
                trainer_id=trainer_id or None,
                title=workout.get("title"),
                description=workout.get("description"),
                goals=json.dumps([goals.get("primary")] + list(goals.get("secondary") or [])),
                fitness_level=goals.get("fitnessLevel"),
                duration_minutes=workout.get("totalDuration", goals.get("timeAvailable")),
                equipment_needed=json.dumps(goals.get("equipment") or []),
                workout_structure=json.dumps(workout),
                generated_prompt=json.dumps(goals),
                is_custom=True,
                created_at=datetime.utcnow().isoformat()
            )
            db.add(record)
            db.commit()
            db.refresh(record)
            logger.info(f"Saved generated workout {record.id} for user {user_id}")
            return record
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to save generated workout for {user_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to generate workout: {str(e)}")
        finally:
            db.close()

    def get_workout(self, workout_id: str) -> dict:
        db = get_db_session()
        try:
            w = db.query(AIGeneratedWorkoutORM).filter(AIGeneratedWorkoutORM.id == workout_id).first()
            return self._to_dict(w) if w else None
        finally:
            db.close()

    def get_user_workouts(self, user_id: str, limit: int = None) -> list:
        db = get_db_session()
        try:
            query = db.query(AIGeneratedWorkoutORM).filter(
                AIGeneratedWorkoutORM.user_id == user_id
            ).order_by(AIGeneratedWorkoutORM.created_at.desc())
            if limit:
                query = query.limit(limit)
            return [self._to_dict(w) for w in query.all()]
        finally:
            db.close()

    def get_trainer_workouts(self, trainer_id: str) -> list:
        """Workouts a trainer generated for clients, with the client's name and email."""
        db = get_db_session()
        try:
            rows = db.query(AIGeneratedWorkoutORM, UserORM).outerjoin(
                UserORM, UserORM.id == AIGeneratedWorkoutORM.user_id
            ).filter(
                AIGeneratedWorkoutORM.trainer_id == trainer_id
            ).order_by(AIGeneratedWorkoutORM.created_at.desc()).all()

            result = []
            for w, user in rows:
                item = self._to_dict(w)
                item["user"] = {"name": user.name, "email": user.email} if user else None
                result.append(item)
            return result
        finally:
            db.close()

    def delete_workout(self, workout_id: str, user_id: str) -> dict:
        """Delete a generated workout owned by, or authored for, the user."""
        db = get_db_session()
        try:
            w = db.query(AIGeneratedWorkoutORM).filter(AIGeneratedWorkoutORM.id == workout_id).first()
            if not w:
                raise HTTPException(status_code=404, detail="Workout not found")
            if user_id not in (w.user_id, w.trainer_id):
                raise HTTPException(status_code=403, detail="Cannot delete this workout")

            db.delete(w)
            db.commit()
            return {"status": "success", "message": "Workout deleted"}
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=f"Failed to delete workout: {str(e)}")
        finally:
            db.close()


# Singleton instance
ai_workout_service = AIWorkoutService()

def get_ai_workout_service() -> AIWorkoutService:
    """Dependency injection helper."""
    return ai_workout_service
