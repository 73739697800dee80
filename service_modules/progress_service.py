"""
Progress Service - append-only workout completion records and their statistics.
"""
from .base import (
    HTTPException, uuid, logging, datetime, timedelta,
    get_db_session, UserProgressORM, WorkoutORM, WorkoutProgramORM
)

logger = logging.getLogger("stheneco")


def _parse_ts(value: str):
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return None


def average_form_score(records) -> float:
    """Mean of form scores, counting a missing score as 0."""
    if not records:
        return 0
    return sum((r.get("form_score") or 0) for r in records) / len(records)


class ProgressService:
    """Service for recording and summarising completed workouts."""

    def _to_dict(self, p: UserProgressORM) -> dict:
        return {
            "id": p.id,
            "user_id": p.user_id,
            "workout_id": p.workout_id,
            "program_id": p.program_id,
            "completed_at": p.completed_at,
            "exercises_completed": p.exercises_completed,
            "total_exercises": p.total_exercises,
            "duration_minutes": p.duration_minutes,
            "calories_burned": p.calories_burned,
            "notes": p.notes,
            "form_score": p.form_score,
        }

    def record_completion(self, user_id: str, data: dict) -> dict:
        if data.get("form_score") is not None and not 0 <= data["form_score"] <= 100:
            raise HTTPException(status_code=400, detail="Form score must be between 0 and 100")

        db = get_db_session()
        try:
            record = UserProgressORM(
                id=str(uuid.uuid4()),
                user_id=user_id,
                workout_id=data.get("workout_id"),
                program_id=data.get("program_id"),
                completed_at=datetime.utcnow().isoformat(),
                exercises_completed=data.get("exercises_completed", 0),
                total_exercises=data.get("total_exercises", 0),
                duration_minutes=data.get("duration_minutes", 0),
                calories_burned=data.get("calories_burned"),
                notes=data.get("notes"),
                form_score=data.get("form_score")
            )
            db.add(record)
            db.commit()
            db.refresh(record)
            logger.info(f"Recorded workout completion {record.id} for {user_id}")
            return self._to_dict(record)
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=f"Failed to record workout: {str(e)}")
        finally:
            db.close()

    def get_user_progress(self, user_id: str, program_id: str = None, limit: int = None) -> list:
        """Progress rows newest first, with workout and program titles."""
        db = get_db_session()
        try:
            query = db.query(UserProgressORM, WorkoutORM.title, WorkoutProgramORM.title).outerjoin(
                WorkoutORM, WorkoutORM.id == UserProgressORM.workout_id
            ).outerjoin(
                WorkoutProgramORM, WorkoutProgramORM.id == UserProgressORM.program_id
            ).filter(UserProgressORM.user_id == user_id)

            if program_id:
                query = query.filter(UserProgressORM.program_id == program_id)

            query = query.order_by(UserProgressORM.completed_at.desc())
            if limit:
                query = query.limit(limit)

            result = []
            for record, workout_title, program_title in query.all():
                item = self._to_dict(record)
                item["workout"] = {"title": workout_title} if workout_title else None
                item["program"] = {"title": program_title} if program_title else None
                result.append(item)
            return result
        finally:
            db.close()

    def get_stats(self, user_id: str, days: int = 30, now: datetime = None) -> dict:
        """Totals over the last `days` days plus up to 4 weekly buckets covering that window."""
        now = now or datetime.utcnow()
        since = now - timedelta(days=days)

        recent = []
        for item in self.get_user_progress(user_id):
            completed = _parse_ts(item["completed_at"])
            if completed and completed >= since:
                item["_completed"] = completed
                recent.append(item)

        weekly = []
        for i in range(0, days, 7):
            week_start = now - timedelta(days=i + 7)
            week_end = now - timedelta(days=i)
            week = [p for p in recent if week_start <= p["_completed"] < week_end]
            weekly.insert(0, {
                "week": f"Week {i // 7 + 1}",
                "workouts": len(week),
                "minutes": sum(p["duration_minutes"] or 0 for p in week),
                "formScore": average_form_score(week),
            })

        return {
            "totalWorkouts": len(recent),
            "totalMinutes": sum(p["duration_minutes"] or 0 for p in recent),
            "totalCalories": sum(p["calories_burned"] or 0 for p in recent),
            "averageFormScore": average_form_score(recent),
            "weeklyData": weekly[-4:],
        }


# Singleton instance
progress_service = ProgressService()

def get_progress_service() -> ProgressService:
    """Dependency injection helper."""
    return progress_service
