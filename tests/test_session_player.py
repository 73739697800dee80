import pytest
from fastapi import HTTPException

from service_modules.session_player import (
    WorkoutSessionPlayer, NOT_STARTED, RUNNING, RESTING, FINISHED, COMPLETION_MESSAGE
)
from service_modules.ai_workout_service import ai_workout_service


def _workout(**overrides):
    workout = {
        "id": "w1",
        "title": "Test Workout",
        "warmup": [{"name": "Jumping Jacks", "sets": 1, "reps": "20"}],
        "mainWorkout": [
            {"name": "Squats", "sets": 3, "reps": "10", "restTime": 30},
            {"name": "Push-ups", "sets": 2, "reps": "8", "restTime": 0},
        ],
        "cooldown": [{"name": "Stretch", "sets": 1, "reps": "30 seconds"}],
        "estimatedCalories": 210,
    }
    workout.update(overrides)
    return workout


def _started(**overrides):
    player = WorkoutSessionPlayer(_workout(**overrides))
    player.start()
    return player


def test_initial_state():
    player = WorkoutSessionPlayer(_workout())
    assert player.state == NOT_STARTED
    assert player.section == "warmup"
    assert player.current_exercise["name"] == "Jumping Jacks"
    assert player.total_exercises == 4


def test_actions_require_start():
    player = WorkoutSessionPlayer(_workout())
    with pytest.raises(HTTPException) as exc:
        player.complete_set()
    assert exc.value.status_code == 409


def test_three_sets_advance_after_three_completions():
    player = _started()
    player.skip_exercise()
    assert player.current_exercise["name"] == "Squats"

    player.complete_set()
    assert player.current_set == 2
    assert player.state == RESTING
    assert player.rest_remaining == 30

    player.complete_set()
    assert player.current_set == 3
    assert player.current_exercise["name"] == "Squats"

    player.complete_set()
    assert player.current_exercise["name"] == "Push-ups"
    assert player.current_set == 1
    assert player.state == RUNNING


def test_no_rest_when_rest_time_is_zero():
    player = _started()
    player.skip_exercise()
    player.skip_exercise()
    assert player.current_exercise["name"] == "Push-ups"
    player.complete_set()
    assert player.state == RUNNING
    assert player.current_set == 2


def test_rest_timer_counts_down_to_running():
    player = _started()
    player.skip_exercise()
    player.complete_set()
    player.tick(29)
    assert player.state == RESTING
    assert player.rest_remaining == 1
    player.tick()
    assert player.state == RUNNING
    assert player.rest_remaining == 0


def test_elapsed_time_only_while_running_and_unpaused():
    player = _started()
    player.tick(5)
    assert player.elapsed_seconds == 5
    player.pause()
    player.tick(10)
    assert player.elapsed_seconds == 5
    player.resume()
    player.tick(55)
    assert player.to_dict()["elapsed"] == "01:00"


def test_finishes_after_last_cooldown_exercise():
    player = _started()
    for _ in range(4):
        player.skip_exercise()
    assert player.state == FINISHED
    assert player.current_exercise is None
    with pytest.raises(HTTPException):
        player.skip_exercise()


def test_empty_sections_are_skipped():
    player = _started(warmup=[], cooldown=[])
    assert player.section == "main"
    player.skip_exercise()
    player.skip_exercise()
    assert player.state == FINISHED


def test_workout_without_exercises_finishes_on_start():
    player = _started(warmup=[], mainWorkout=[], cooldown=[])
    assert player.state == FINISHED


def test_summary():
    player = _started()
    player.tick(125)
    player.skip_exercise()
    player.skip_exercise()
    summary = player.summary()
    assert summary == {
        "message": COMPLETION_MESSAGE,
        "duration": 2,
        "exercisesCompleted": 2,
        "totalExercises": 4,
        "estimatedCalories": 210,
    }


def test_restart_clears_everything():
    player = _started()
    player.tick(10)
    player.skip_exercise()
    player.restart()
    assert player.state == NOT_STARTED
    assert player.elapsed_seconds == 0
    assert player.section == "warmup"
    assert player.exercise_index == 0
    assert player.summary()["exercisesCompleted"] == 0


def test_snake_case_main_workout_key(athlete, client):
    saved = ai_workout_service.save_workout(
        {"title": "Legacy", "main_workout": [{"name": "Lunges", "sets": 2, "reps": "8"}], "estimated_calories": 100},
        {"primary": "General Fitness"},
        athlete["id"],
    )
    response = client.post("/api/sessions", headers=athlete["headers"], json={"workout_id": saved.id})
    assert response.status_code == 200
    data = response.json()
    assert data["section"] == "main"
    assert data["current_exercise"]["name"] == "Lunges"


def test_missing_workout(athlete, client):
    response = client.post("/api/sessions", headers=athlete["headers"], json={"workout_id": "nope"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Workout not found or has invalid structure"


def test_session_over_http(athlete, client):
    workout = ai_workout_service.generate({"primary": "General Fitness", "timeAvailable": 10}, athlete["id"])
    session = client.post("/api/sessions", headers=athlete["headers"], json={"workout_id": workout["id"]}).json()
    session_id = session["session_id"]
    assert session["state"] == NOT_STARTED
    assert session["total_exercises"] == 10

    assert client.post(f"/api/sessions/{session_id}/start", headers=athlete["headers"]).json()["state"] == RUNNING
    data = client.post(f"/api/sessions/{session_id}/tick", headers=athlete["headers"], json={"seconds": 90}).json()
    assert data["elapsed_seconds"] == 90

    for _ in range(10):
        data = client.post(f"/api/sessions/{session_id}/skip", headers=athlete["headers"]).json()
    assert data["state"] == FINISHED
    assert data["summary"]["exercisesCompleted"] == 10
    assert data["summary"]["estimatedCalories"] == 70

    summary = client.delete(f"/api/sessions/{session_id}", headers=athlete["headers"]).json()
    assert summary["duration"] == 1
    assert client.get(f"/api/sessions/{session_id}", headers=athlete["headers"]).status_code == 404


def test_unknown_action(athlete, client):
    workout = ai_workout_service.generate({"primary": "General Fitness"}, athlete["id"])
    session_id = client.post(
        "/api/sessions", headers=athlete["headers"], json={"workout_id": workout["id"]}
    ).json()["session_id"]
    response = client.post(f"/api/sessions/{session_id}/jump", headers=athlete["headers"])
    assert response.status_code == 400


def test_other_users_session_is_hidden(athlete, sign_up, client):
    workout = ai_workout_service.generate({"primary": "General Fitness"}, athlete["id"])
    session_id = client.post(
        "/api/sessions", headers=athlete["headers"], json={"workout_id": workout["id"]}
    ).json()["session_id"]
    other = sign_up("athlete")
    assert client.get(f"/api/sessions/{session_id}", headers=other["headers"]).status_code == 404


def test_irregular_generated_exercises_are_read_leniently():
    player = WorkoutSessionPlayer(_workout(
        warmup=["Arm circles 30s"],
        mainWorkout=[
            {"name": "Rows", "sets": "3-4", "reps": "10", "restTime": "60s"},
            {"name": "Dips", "sets": "as many as possible", "restTime": "none"},
            "Push-ups 3x10",
        ],
        cooldown="Stretch it out",
        estimatedCalories="250 kcal",
    ))
    assert player.total_exercises == 2
    assert player.section == "main"
    assert player.estimated_calories == 250

    rows, dips = player.sections["main"]
    assert (rows["sets"], rows["restTime"]) == (3, 60)
    assert (dips["sets"], dips["restTime"]) == (1, 0)


def test_irregular_generated_workout_over_http(athlete, client):
    saved = ai_workout_service.save_workout(
        {"title": "Loose", "mainWorkout": [{"name": "Rows", "sets": "3-4", "restTime": "60s"}, "Push-ups 3x10"]},
        {"primary": "General Fitness"},
        athlete["id"],
    )
    response = client.post("/api/sessions", headers=athlete["headers"], json={"workout_id": saved.id})
    assert response.status_code == 200
    data = response.json()
    assert data["total_exercises"] == 1
    assert data["current_exercise"]["sets"] == 3


def test_long_tick_consumes_rest_then_counts_elapsed():
    player = _started()
    player.skip_exercise()
    player.complete_set()
    assert player.rest_remaining == 30
    player.tick(100)
    assert player.state == RUNNING
    assert player.rest_remaining == 0
    assert player.elapsed_seconds == 70


@pytest.mark.parametrize("seconds", [0, -5, 3601, 10000000000])
def test_tick_seconds_are_bounded(athlete, client, seconds):
    workout = ai_workout_service.generate({"primary": "General Fitness"}, athlete["id"])
    session_id = client.post(
        "/api/sessions", headers=athlete["headers"], json={"workout_id": workout["id"]}
    ).json()["session_id"]
    client.post(f"/api/sessions/{session_id}/start", headers=athlete["headers"])
    response = client.post(
        f"/api/sessions/{session_id}/tick", headers=athlete["headers"], json={"seconds": seconds}
    )
    assert response.status_code == 422
