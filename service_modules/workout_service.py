"""
Workout Service - trainer-authored programs and their week/day workouts.
"""
from .base import (
    HTTPException, uuid, json, logging, datetime,
    get_db_session, WorkoutProgramORM, WorkoutORM, UserORM, load_json
)

logger = logging.getLogger("stheneco")

CATEGORIES = ("strength", "cardio", "hiit", "yoga", "flexibility")
LEVELS = ("beginner", "intermediate", "advanced")


class WorkoutService:
    """Service for the workout program library."""

    def _program_to_dict(self, program: WorkoutProgramORM, trainer: UserORM = None) -> dict:
        data = {
            "id": program.id,
            "title": program.title,
            "description": program.description,
            "trainer_id": program.trainer_id,
            "category": program.category,
            "difficulty_level": program.difficulty_level,
            "duration_weeks": program.duration_weeks,
            "workouts_per_week": program.workouts_per_week,
            "equipment_needed": load_json(program.equipment_needed),
            "price": program.price or 0,
            "is_active": program.is_active,
            "created_at": program.created_at,
            "updated_at": program.updated_at,
        }
        if trainer is not None:
            data["trainer"] = {
                "name": trainer.name,
                "specialty": trainer.specialty,
                "avatar_url": trainer.avatar_url,
            }
        return data

    def _workout_to_dict(self, workout: WorkoutORM) -> dict:
        return {
            "id": workout.id,
            "program_id": workout.program_id,
            "week_number": workout.week_number,
            "day_number": workout.day_number,
            "title": workout.title,
            "description": workout.description,
            "exercises": load_json(workout.exercises_json),
            "estimated_duration": workout.estimated_duration,
            "created_at": workout.created_at,
        }

    def get_programs(self, search: str = None, category: str = None, level: str = None) -> list:
        """Get active programs, newest first, with their trainer."""
        db = get_db_session()
        try:
            rows = db.query(WorkoutProgramORM, UserORM).outerjoin(
                UserORM, UserORM.id == WorkoutProgramORM.trainer_id
            ).filter(
                WorkoutProgramORM.is_active == True
            ).order_by(WorkoutProgramORM.created_at.desc()).all()

            programs = []
            for program, trainer in rows:
                if category and category != "all" and program.category != category:
                    continue
                if level and level != "all" and program.difficulty_level != level:
                    continue
                if search:
                    term = search.lower()
                    haystack = f"{program.title or ''} {program.description or ''}".lower()
                    if term not in haystack:
                        continue
                programs.append(self._program_to_dict(program, trainer))
            return programs
        finally:
            db.close()

    def get_program(self, program_id: str, db_session=None) -> dict:
        db = db_session if db_session else get_db_session()
        should_close = db_session is None
        try:
            program = db.query(WorkoutProgramORM).filter(WorkoutProgramORM.id == program_id).first()
            if not program:
                raise HTTPException(status_code=404, detail="Program not found")
            return self._program_to_dict(program)
        finally:
            if should_close:
                db.close()

    def get_program_workouts(self, program_id: str) -> list:
        """Get a program's workouts ordered by week, then day."""
        db = get_db_session()
        try:
            workouts = db.query(WorkoutORM).filter(
                WorkoutORM.program_id == program_id
            ).order_by(WorkoutORM.week_number.asc(), WorkoutORM.day_number.asc()).all()
            return [self._workout_to_dict(w) for w in workouts]
        finally:
            db.close()

    def create_program(self, program: dict, trainer_id: str) -> dict:
        """Create a new program owned by the trainer."""
        if program.get("category") not in CATEGORIES:
            raise HTTPException(status_code=400, detail=f"Invalid category: {program.get('category')}")
        if program.get("difficulty_level") not in LEVELS:
            raise HTTPException(status_code=400, detail=f"Invalid difficulty level: {program.get('difficulty_level')}")
        if (program.get("price") or 0) < 0:
            raise HTTPException(status_code=400, detail="Price cannot be negative")

        db = get_db_session()
        try:
            db_program = WorkoutProgramORM(
                id=str(uuid.uuid4()),
                title=program["title"],
                description=program.get("description"),
                trainer_id=trainer_id,
                category=program["category"],
                difficulty_level=program["difficulty_level"],
                duration_weeks=program.get("duration_weeks", 4),
                workouts_per_week=program.get("workouts_per_week", 3),
                equipment_needed=json.dumps(program.get("equipment_needed") or []),
                price=program.get("price") or 0,
                is_active=True,
                created_at=datetime.utcnow().isoformat()
            )
            db.add(db_program)
            db.commit()
            db.refresh(db_program)

            logger.info(f"Trainer {trainer_id} created program {db_program.id}")
            return self._program_to_dict(db_program)
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=f"Failed to create program: {str(e)}")
        finally:
            db.close()

    def add_workout(self, program_id: str, workout: dict, trainer_id: str) -> dict:
        """Add a week/day workout to one of the trainer's programs."""
        db = get_db_session()
        try:
            program = db.query(WorkoutProgramORM).filter(WorkoutProgramORM.id == program_id).first()
            if not program:
                raise HTTPException(status_code=404, detail="Program not found")
            if program.trainer_id != trainer_id:
                raise HTTPException(status_code=403, detail="Cannot edit this program")

            db_workout = WorkoutORM(
                id=str(uuid.uuid4()),
                program_id=program_id,
                week_number=workout.get("week_number", 1),
                day_number=workout.get("day_number", 1),
                title=workout["title"],
                description=workout.get("description"),
                exercises_json=json.dumps(workout.get("exercises") or []),
                estimated_duration=workout.get("estimated_duration"),
                created_at=datetime.utcnow().isoformat()
            )
            db.add(db_workout)
            program.updated_at = datetime.utcnow().isoformat()
            db.commit()
            db.refresh(db_workout)
            return self._workout_to_dict(db_workout)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=f"Failed to add workout: {str(e)}")
        finally:
            db.close()

    def start_program(self, program_id: str, has_subscription: bool) -> dict:
        """Resolve the first workout of a program the user may access."""
        program = self.get_program(program_id)

        # Free users can only start free programs
        if not has_subscription and program["price"] > 0:
            raise HTTPException(
                status_code=402,
                detail="This program requires a premium subscription. See /api/subscriptions/plans to upgrade."
            )

        workouts = self.get_program_workouts(program_id)
        if not workouts:
            raise HTTPException(
                status_code=404,
                detail="This program doesn't have any workouts available yet. Please try another program or contact support."
            )

        return {
            "programId": program["id"],
            "programTitle": program["title"],
            "isFirstWorkout": True,
            "workout": workouts[0],
        }


# Singleton instance for easy import
workout_service = WorkoutService()

def get_workout_service() -> WorkoutService:
    """Dependency injection helper."""
    return workout_service
