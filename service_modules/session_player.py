"""
Workout Session Player - steps through warmup, main and cooldown exercises.

The player is a plain state machine driven by user actions (complete set,
skip) and one-second ticks (elapsed time, rest countdown). In-progress
sessions live only in this process; a restart loses the position.
"""
import re

from .base import HTTPException, uuid, logging, datetime, load_json
from .ai_workout_service import ai_workout_service
from database import get_db_session
from models_orm import WorkoutORM

logger = logging.getLogger("stheneco")

NOT_STARTED = "not_started"
RUNNING = "running"
RESTING = "resting"
FINISHED = "finished"

SECTIONS = ("warmup", "main", "cooldown")
COMPLETION_MESSAGE = "Workout completed! Great job!"


def _leading_int(value, default: int = 0) -> int:
    """Read generated values like 3, "3-4", "60s" or "45 seconds" as their leading integer."""
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return int(value)
    match = re.match(r"\s*(\d+)", str(value or ""))
    return int(match.group(1)) if match else default


def normalize_exercise(exercise: dict) -> dict:
    """Accept both generated (camelCase) and library (snake_case) exercise shapes."""
    rest = exercise.get("restTime", exercise.get("rest_time"))
    return {
        "name": exercise.get("name", "Exercise"),
        "instructions": exercise.get("instructions") or exercise.get("description") or "",
        "sets": max(_leading_int(exercise.get("sets"), 1), 1),
        "reps": str(exercise.get("reps", "")),
        "restTime": max(_leading_int(rest), 0),
        "muscleGroups": exercise.get("muscleGroups") or exercise.get("muscle_groups") or [],
        "modifications": exercise.get("modifications"),
    }


def normalize_section(exercises) -> list:
    # Generated sections sometimes hold plain strings; only dict entries are playable
    if not isinstance(exercises, list):
        return []
    return [normalize_exercise(e) for e in exercises if isinstance(e, dict)]


class WorkoutSessionPlayer:
    def __init__(self, workout: dict):
        self.workout_id = workout.get("id")
        self.title = workout.get("title", "Workout")
        self.estimated_calories = _leading_int(workout.get("estimatedCalories"))
        self.sections = {
            "warmup": normalize_section(workout.get("warmup")),
            "main": normalize_section(workout.get("mainWorkout")),
            "cooldown": normalize_section(workout.get("cooldown")),
        }
        self.restart()

    # --- STATE ---

    def restart(self):
        self.state = NOT_STARTED
        self.paused = False
        self.section = self._first_section_from(0) or SECTIONS[0]
        self.exercise_index = 0
        self.current_set = 1
        self.rest_remaining = 0
        self.elapsed_seconds = 0
        self.completed = set()
        self.started_at = None

    def _first_section_from(self, position: int):
        for name in SECTIONS[position:]:
            if self.sections[name]:
                return name
        return None

    @property
    def total_exercises(self) -> int:
        return sum(len(v) for v in self.sections.values())

    @property
    def current_exercise(self):
        if self.state == FINISHED:
            return None
        exercises = self.sections[self.section]
        if self.exercise_index < len(exercises):
            return exercises[self.exercise_index]
        return None

    def _require_active(self):
        if self.state == NOT_STARTED:
            raise HTTPException(status_code=409, detail="Workout has not been started")
        if self.state == FINISHED:
            raise HTTPException(status_code=409, detail="Workout is already finished")

    # --- ACTIONS ---

    def start(self):
        if self.state != NOT_STARTED:
            raise HTTPException(status_code=409, detail="Workout already started")
        self.state = RUNNING
        self.started_at = datetime.utcnow().isoformat()
        if self.total_exercises == 0:
            self._finish()

    def pause(self):
        self._require_active()
        self.paused = True

    def resume(self):
        self._require_active()
        self.paused = False

    def tick(self, seconds: int = 1):
        """Advance the clock. Rest time counts down; otherwise elapsed time grows."""
        if self.state not in (RUNNING, RESTING) or self.paused:
            return
        seconds = max(seconds, 0)
        if self.state == RESTING:
            used = min(seconds, self.rest_remaining)
            self.rest_remaining -= used
            seconds -= used
            if self.rest_remaining <= 0:
                self.rest_remaining = 0
                self.state = RUNNING
        self.elapsed_seconds += seconds

    def skip_rest(self):
        self._require_active()
        if self.state == RESTING:
            self.rest_remaining = 0
            self.state = RUNNING

    def complete_set(self):
        """Count a set. After the last set the exercise is completed and the player advances."""
        self._require_active()
        exercise = self.current_exercise
        if exercise is None:
            return
        if self.state == RESTING:
            self.skip_rest()

        if self.current_set < exercise["sets"]:
            self.current_set += 1
            if exercise["restTime"] > 0:
                self.rest_remaining = exercise["restTime"]
                self.state = RESTING
        else:
            self._complete_exercise()

    def skip_exercise(self):
        self._require_active()
        if self.state == RESTING:
            self.skip_rest()
        self._complete_exercise()

    def _complete_exercise(self):
        self.completed.add(f"{self.section}-{self.exercise_index}")
        self.current_set = 1
        self._next_exercise()

    def _next_exercise(self):
        if self.exercise_index < len(self.sections[self.section]) - 1:
            self.exercise_index += 1
            return
        next_section = self._first_section_from(SECTIONS.index(self.section) + 1)
        if next_section:
            self.section = next_section
            self.exercise_index = 0
        else:
            self._finish()

    def _finish(self):
        self.state = FINISHED
        self.paused = False
        self.rest_remaining = 0
        logger.info(f"Workout session finished for workout {self.workout_id}")

    # --- VIEWS ---

    def summary(self) -> dict:
        return {
            "message": COMPLETION_MESSAGE,
            "duration": self.elapsed_seconds // 60,
            "exercisesCompleted": len(self.completed),
            "totalExercises": self.total_exercises,
            "estimatedCalories": self.estimated_calories,
        }

    def section_progress(self) -> float:
        exercises = self.sections[self.section]
        if not exercises:
            return 0
        return (self.exercise_index + 1) / len(exercises) * 100

    def to_dict(self) -> dict:
        return {
            "workout_id": self.workout_id,
            "title": self.title,
            "state": self.state,
            "paused": self.paused,
            "section": self.section,
            "exercise_index": self.exercise_index,
            "current_set": self.current_set,
            "current_exercise": self.current_exercise,
            "rest_remaining": self.rest_remaining,
            "elapsed_seconds": self.elapsed_seconds,
            "elapsed": format_time(self.elapsed_seconds),
            "completed_count": len(self.completed),
            "total_exercises": self.total_exercises,
            "section_progress": self.section_progress(),
        }


def format_time(seconds: int) -> str:
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


class SessionPlayerService:
    """Keeps in-progress players in memory, keyed by session id."""

    def __init__(self):
        self._sessions = {}

    def load_workout(self, workout_id: str, user_id: str) -> dict:
        """Find a generated workout (or a library workout) and shape it for the player."""
        generated = ai_workout_service.get_workout(workout_id)
        if generated:
            if user_id not in (generated["user_id"], generated["trainer_id"]):
                raise HTTPException(status_code=404, detail="Workout not found or has invalid structure")
            structure = generated["workout_structure"]
            if not isinstance(structure, dict):
                structure = {}
            return {
                "id": generated["id"],
                "title": generated["title"],
                "warmup": structure.get("warmup") or [],
                "mainWorkout": structure.get("mainWorkout") or structure.get("main_workout") or [],
                "cooldown": structure.get("cooldown") or [],
                "estimatedCalories": structure.get("estimatedCalories") or structure.get("estimated_calories") or 0,
            }

        db = get_db_session()
        try:
            workout = db.query(WorkoutORM).filter(WorkoutORM.id == workout_id).first()
            if workout:
                return {
                    "id": workout.id,
                    "title": workout.title,
                    "warmup": [],
                    "mainWorkout": load_json(workout.exercises_json),
                    "cooldown": [],
                    "estimatedCalories": 0,
                }
        finally:
            db.close()

        raise HTTPException(status_code=404, detail="Workout not found or has invalid structure")

    def create_session(self, workout_id: str, user_id: str) -> dict:
        player = WorkoutSessionPlayer(self.load_workout(workout_id, user_id))
        session_id = str(uuid.uuid4())
        self._sessions[session_id] = (user_id, player)
        return {"session_id": session_id, **player.to_dict()}

    def get_player(self, session_id: str, user_id: str) -> WorkoutSessionPlayer:
        entry = self._sessions.get(session_id)
        if not entry or entry[0] != user_id:
            raise HTTPException(status_code=404, detail="Session not found")
        return entry[1]

    def perform(self, session_id: str, user_id: str, action: str, **kwargs) -> dict:
        player = self.get_player(session_id, user_id)
        handlers = {
            "start": player.start,
            "pause": player.pause,
            "resume": player.resume,
            "tick": player.tick,
            "skip_rest": player.skip_rest,
            "complete_set": player.complete_set,
            "skip": player.skip_exercise,
            "restart": player.restart,
        }
        if action not in handlers:
            raise HTTPException(status_code=400, detail=f"Unknown action: {action}")
        handlers[action](**kwargs)

        result = {"session_id": session_id, **player.to_dict()}
        if player.state == FINISHED:
            result["summary"] = player.summary()
        return result

    def end_session(self, session_id: str, user_id: str) -> dict:
        player = self.get_player(session_id, user_id)
        del self._sessions[session_id]
        return player.summary()


# Singleton instance
session_player_service = SessionPlayerService()

def get_session_player_service() -> SessionPlayerService:
    """Dependency injection helper."""
    return session_player_service
