from datetime import datetime, timedelta

import pytest

from service_modules.progress_service import progress_service


def _create_program(client, trainer, **overrides):
    body = {"title": "Strength Basics", "category": "strength", "difficulty_level": "beginner", "price": 0}
    body.update(overrides)
    response = client.post("/api/programs", headers=trainer["headers"], json=body)
    assert response.status_code == 200, response.text
    return response.json()


def _add_workout(client, trainer, program_id, week, day):
    return client.post(
        f"/api/programs/{program_id}/workouts", headers=trainer["headers"],
        json={"week_number": week, "day_number": day, "title": f"W{week}D{day}",
              "exercises": [{"name": "Squat", "sets": 3, "reps": "5"}]}
    )


def test_athlete_cannot_create_program(athlete, client):
    response = client.post(
        "/api/programs", headers=athlete["headers"], json={"title": "Nope", "category": "strength"}
    )
    assert response.status_code == 403


def test_invalid_category(trainer, client):
    response = client.post(
        "/api/programs", headers=trainer["headers"], json={"title": "Nope", "category": "dance"}
    )
    assert response.status_code == 400


def test_listing_and_filters(trainer, athlete, client):
    program = _create_program(client, trainer, title="Zen Flow Unique", category="yoga")
    programs = client.get(
        "/api/programs", params={"category": "yoga", "search": "zen flow"}, headers=athlete["headers"]
    ).json()
    found = [p for p in programs if p["id"] == program["id"]]
    assert found and found[0]["trainer"]["specialty"] == "Strength"

    programs = client.get("/api/programs?category=cardio", headers=athlete["headers"]).json()
    assert program["id"] not in [p["id"] for p in programs]


def test_workouts_ordered_by_week_then_day(trainer, athlete, client):
    program = _create_program(client, trainer)
    for week, day in [(2, 1), (1, 3), (1, 1)]:
        assert _add_workout(client, trainer, program["id"], week, day).status_code == 200

    workouts = client.get(f"/api/programs/{program['id']}/workouts", headers=athlete["headers"]).json()
    assert [w["title"] for w in workouts] == ["W1D1", "W1D3", "W2D1"]

    started = client.post(f"/api/programs/{program['id']}/start", headers=athlete["headers"]).json()
    assert started["isFirstWorkout"] is True
    assert started["workout"]["title"] == "W1D1"


def test_cannot_add_workout_to_others_program(trainer, sign_up, client):
    program = _create_program(client, trainer)
    other = sign_up("trainer")
    assert _add_workout(client, other, program["id"], 1, 1).status_code == 403


def test_paid_program_needs_subscription(trainer, athlete, premium_athlete, client):
    program = _create_program(client, trainer, price=29.99)
    _add_workout(client, trainer, program["id"], 1, 1)

    assert client.post(f"/api/programs/{program['id']}/start", headers=athlete["headers"]).status_code == 402
    assert client.post(f"/api/programs/{program['id']}/start", headers=premium_athlete["headers"]).status_code == 200


def test_program_without_workouts(trainer, athlete, client):
    program = _create_program(client, trainer)
    response = client.post(f"/api/programs/{program['id']}/start", headers=athlete["headers"])
    assert response.status_code == 404
    assert response.json()["detail"].startswith("This program doesn't have any workouts available yet")


def test_program_workout_can_be_played(trainer, athlete, client):
    program = _create_program(client, trainer)
    workout = _add_workout(client, trainer, program["id"], 1, 1).json()
    session = client.post("/api/sessions", headers=athlete["headers"], json={"workout_id": workout["id"]}).json()
    assert session["section"] == "main"
    assert session["current_exercise"]["sets"] == 3


def test_record_and_list_progress(athlete, client):
    response = client.post(
        "/api/progress", headers=athlete["headers"],
        json={"duration_minutes": 30, "calories_burned": 200, "form_score": 88, "exercises_completed": 5}
    )
    assert response.status_code == 200
    rows = client.get("/api/progress", headers=athlete["headers"]).json()
    assert len(rows) == 1
    assert rows[0]["form_score"] == 88


def test_form_score_out_of_range(athlete, client):
    response = client.post("/api/progress", headers=athlete["headers"], json={"form_score": 120})
    assert response.status_code == 400


def test_stats_window_and_weekly_buckets(athlete):
    progress_service.record_completion(athlete["id"], {"duration_minutes": 30, "calories_burned": 100, "form_score": 80})
    progress_service.record_completion(athlete["id"], {"duration_minutes": 20, "calories_burned": 50})

    stats = progress_service.get_stats(athlete["id"], days=30, now=datetime.utcnow() + timedelta(seconds=1))
    assert stats["totalWorkouts"] == 2
    assert stats["totalMinutes"] == 50
    assert stats["totalCalories"] == 150
    assert stats["averageFormScore"] == pytest.approx(40)
    assert len(stats["weeklyData"]) == 4
    assert stats["weeklyData"][-1]["workouts"] == 2

    later = progress_service.get_stats(athlete["id"], days=7, now=datetime.utcnow() + timedelta(days=10))
    assert later["totalWorkouts"] == 0


def test_weekly_buckets_follow_the_window(athlete):
    progress_service.record_completion(athlete["id"], {"duration_minutes": 15})
    now = datetime.utcnow() + timedelta(seconds=1)
    assert len(progress_service.get_stats(athlete["id"], days=7, now=now)["weeklyData"]) == 1
    assert len(progress_service.get_stats(athlete["id"], days=14, now=now)["weeklyData"]) == 2
    assert len(progress_service.get_stats(athlete["id"], days=90, now=now)["weeklyData"]) == 4
