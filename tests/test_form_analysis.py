import random

from service_modules.form_analysis_service import (
    FormAnalysisService, FORM_CORRECTIONS, GOOD_POINTS, IMPROVEMENT_SUGGESTIONS, MIN_SCORE, MAX_SCORE
)


def test_scores_stay_in_range():
    service = FormAnalysisService(rng=random.Random(7))
    scores = [service.analyze("pushup")["overallScore"] for _ in range(300)]
    assert min(scores) >= MIN_SCORE
    assert max(scores) <= MAX_SCORE


def test_same_lists_every_time():
    service = FormAnalysisService()
    first = service.analyze("deadlift")
    second = service.analyze("deadlift")
    assert first["formCorrections"] == second["formCorrections"] == FORM_CORRECTIONS["deadlift"]
    assert first["goodPoints"] == GOOD_POINTS["deadlift"]
    assert first["improvementSuggestions"] == IMPROVEMENT_SUGGESTIONS["deadlift"]


def test_unknown_exercise_uses_squat():
    result = FormAnalysisService().analyze("bench-press")
    assert result["exercise"] == "squat"
    assert result["formCorrections"] == FORM_CORRECTIONS["squat"]


def test_free_user_gets_upgrade_prompt(athlete, client):
    response = client.post("/api/form-analysis", headers=athlete["headers"], json={"exercise": "plank"})
    assert response.status_code == 200
    data = response.json()
    assert data["requires_upgrade"] is True
    assert "overallScore" not in data


def test_premium_user_gets_analysis_and_history(premium_athlete, client):
    response = client.post("/api/form-analysis", headers=premium_athlete["headers"], json={"exercise": "plank"})
    assert response.status_code == 200
    data = response.json()
    assert data["requires_upgrade"] is False
    assert MIN_SCORE <= data["overallScore"] <= MAX_SCORE
    assert data["goodPoints"] == GOOD_POINTS["plank"]

    history = client.get("/api/form-analysis/history", headers=premium_athlete["headers"]).json()
    assert len(history) == 1
    assert history[0]["id"] == data["id"]
    assert history[0]["exercise"] == "plank"


def test_exercise_list(athlete, client):
    exercises = client.get("/api/form-analysis/exercises", headers=athlete["headers"]).json()
    assert [e["id"] for e in exercises] == ["squat", "pushup", "deadlift", "plank"]
