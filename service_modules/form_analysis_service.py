"""
Form Analysis Service - canned exercise feedback.

No video is analysed: feedback comes from a fixed table keyed by exercise and
the score is random. Unknown exercise keys fall back to "squat".
"""
from .base import (
    HTTPException, uuid, json, logging, datetime,
    get_db_session, FormAnalysisORM, load_json
)
import random

logger = logging.getLogger("stheneco")

DEFAULT_EXERCISE = "squat"
MIN_SCORE = 70
MAX_SCORE = 99

EXERCISES = [
    {"id": "squat", "name": "Squat", "description": "Basic squat movement analysis"},
    {"id": "pushup", "name": "Push-up", "description": "Upper body push movement"},
    {"id": "deadlift", "name": "Deadlift", "description": "Hip hinge movement pattern"},
    {"id": "plank", "name": "Plank", "description": "Core stability assessment"},
]

FORM_CORRECTIONS = {
    "squat": [
        "Keep your knees aligned with your toes during the squat",
        "Maintain a straight back throughout the movement",
        "Go deeper in the squat for full range of motion",
    ],
    "pushup": [
        "Lower your chest closer to the ground",
        "Keep your body in a straight line from head to heels",
        "Control the descent more slowly",
    ],
    "deadlift": [
        "Keep the bar close to your body throughout the movement",
        "Drive through your heels, not your toes",
        "Maintain a neutral spine position",
    ],
    "plank": [
        "Avoid letting your hips sag or pike up",
        "Keep your core actively engaged",
        "Maintain neutral head position",
    ],
}

GOOD_POINTS = {
    "squat": ["Good depth in your squat position", "Consistent tempo throughout reps", "Proper breathing pattern"],
    "pushup": ["Excellent core engagement", "Good arm positioning", "Consistent range of motion"],
    "deadlift": ["Great hip hinge pattern", "Strong lockout position", "Good bar path"],
    "plank": ["Strong core activation", "Good shoulder stability", "Consistent hold time"],
}

IMPROVEMENT_SUGGESTIONS = {
    "squat": [
        "Focus on ankle mobility to improve squat depth",
        "Practice wall sits to build endurance",
        "Add pause squats to improve control",
    ],
    "pushup": [
        "Start with incline push-ups if needed",
        "Focus on slow, controlled movements",
        "Add pause reps at the bottom",
    ],
    "deadlift": [
        "Work on hip flexibility",
        "Practice the movement with light weight first",
        "Focus on the hip hinge pattern",
    ],
    "plank": [
        "Build up hold time gradually",
        "Practice side planks for stability",
        "Focus on breathing during holds",
    ],
}

UPGRADE_PROMPT = {
    "requires_upgrade": True,
    "title": "AI Form Analysis",
    "message": "Get real-time feedback on your exercise form with AI-powered analysis. "
               "Upgrade to Premium to unlock this feature.",
    "upgrade_url": "/api/subscriptions/plans",
}


def _lookup(table: dict, exercise: str) -> list:
    return list(table.get(exercise) or table[DEFAULT_EXERCISE])


class FormAnalysisService:
    """Service for canned form feedback."""

    def __init__(self, rng: random.Random = None):
        self._rng = rng or random.Random()

    def get_exercises(self) -> list:
        return [dict(e) for e in EXERCISES]

    def analyze(self, exercise: str) -> dict:
        return {
            "exercise": exercise if exercise in FORM_CORRECTIONS else DEFAULT_EXERCISE,
            "overallScore": self._rng.randint(MIN_SCORE, MAX_SCORE),
            "formCorrections": _lookup(FORM_CORRECTIONS, exercise),
            "goodPoints": _lookup(GOOD_POINTS, exercise),
            "improvementSuggestions": _lookup(IMPROVEMENT_SUGGESTIONS, exercise),
        }

    def analyze_for_user(self, user_id: str, exercise: str, has_subscription: bool) -> dict:
        """Gate on the subscription, then analyse and store the result."""
        if not has_subscription:
            return dict(UPGRADE_PROMPT)

        result = self.analyze(exercise)
        db = get_db_session()
        try:
            record = FormAnalysisORM(
                id=str(uuid.uuid4()),
                user_id=user_id,
                exercise_key=result["exercise"],
                overall_score=result["overallScore"],
                corrections=json.dumps(result["formCorrections"]),
                good_points=json.dumps(result["goodPoints"]),
                suggestions=json.dumps(result["improvementSuggestions"]),
                created_at=datetime.utcnow().isoformat()
            )
            db.add(record)
            db.commit()
            result["id"] = record.id
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=f"Failed to save form analysis: {str(e)}")
        finally:
            db.close()

        result["requires_upgrade"] = False
        return result

    def history(self, user_id: str) -> list:
        db = get_db_session()
        try:
            rows = db.query(FormAnalysisORM).filter(
                FormAnalysisORM.user_id == user_id
            ).order_by(FormAnalysisORM.created_at.desc()).all()
            return [{
                "id": r.id,
                "exercise": r.exercise_key,
                "overallScore": r.overall_score,
                "formCorrections": load_json(r.corrections),
                "goodPoints": load_json(r.good_points),
                "improvementSuggestions": load_json(r.suggestions),
                "created_at": r.created_at,
            } for r in rows]
        finally:
            db.close()


# Singleton instance
form_analysis_service = FormAnalysisService()

def get_form_analysis_service() -> FormAnalysisService:
    """Dependency injection helper."""
    return form_analysis_service
