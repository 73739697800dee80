from service_modules.ai_workout_service import ai_workout_service

GOALS_STEP = {"primary": "Lose Weight", "workoutType": "hiit"}
CONSTRAINTS_STEP = {"equipment": ["bodyweight", "yoga mat"], "timeAvailable": 20, "fitnessLevel": "beginner"}


def _post(client, user, step, body=None):
    return client.post(f"/api/workout-generator/{step}", headers=user["headers"], json=body)


def test_full_wizard_flow(athlete, client):
    state = _post(client, athlete, "start").json()
    assert state["step"] == 1

    state = _post(client, athlete, "goals", GOALS_STEP).json()
    assert state["step"] == 2
    assert state["goals"]["primary"] == "Lose Weight"

    state = _post(client, athlete, "constraints", CONSTRAINTS_STEP).json()
    assert state["step"] == 2
    assert state["goals"]["timeAvailable"] == 20

    state = _post(client, athlete, "generate").json()
    assert state["step"] == 3
    assert state["workout"]["title"] == "20-Minute Lose Weight Workout"

    state = _post(client, athlete, "accept").json()
    assert state["step"] == 4
    assert ai_workout_service.get_workout(state["workout"]["id"]) is not None


def test_reject_deletes_draft_and_returns_to_step_two(athlete, client):
    _post(client, athlete, "start")
    _post(client, athlete, "goals", GOALS_STEP)
    workout_id = _post(client, athlete, "generate").json()["workout"]["id"]

    state = _post(client, athlete, "reject").json()
    assert state["step"] == 2
    assert state["workout"] is None
    assert ai_workout_service.get_workout(workout_id) is None


def test_wrong_step_is_rejected(athlete, client):
    _post(client, athlete, "start")
    assert _post(client, athlete, "generate").status_code == 409
    assert _post(client, athlete, "accept").status_code == 409


def test_primary_goal_required(athlete, client):
    _post(client, athlete, "start")
    response = _post(client, athlete, "goals", {"primary": ""})
    assert response.status_code == 400
    assert client.get("/api/workout-generator", headers=athlete["headers"]).json()["step"] == 1


def test_equipment_required(athlete, client):
    _post(client, athlete, "start")
    _post(client, athlete, "goals", GOALS_STEP)
    response = _post(client, athlete, "constraints", {"equipment": []})
    assert response.status_code == 400


def test_restart_resets_state(athlete, client):
    _post(client, athlete, "start")
    _post(client, athlete, "goals", GOALS_STEP)
    state = _post(client, athlete, "restart").json()
    assert state["step"] == 1
    assert state["goals"]["primary"] == ""


def test_trainer_targets_roster_client(trainer, athlete, client):
    client.post("/api/trainer/clients", headers=trainer["headers"], json={"email": athlete["email"]})

    options = client.get("/api/workout-generator/options", headers=trainer["headers"]).json()
    assert [c["id"] for c in options["clients"]] == [athlete["id"]]

    _post(client, trainer, "start")
    _post(client, trainer, "goals", {**GOALS_STEP, "clientId": athlete["id"]})
    workout_id = _post(client, trainer, "generate").json()["workout"]["id"]

    stored = ai_workout_service.get_workout(workout_id)
    assert stored["user_id"] == athlete["id"]
    assert stored["trainer_id"] == trainer["id"]


def test_trainer_cannot_target_stranger(trainer, athlete, client):
    _post(client, trainer, "start")
    response = _post(client, trainer, "goals", {**GOALS_STEP, "clientId": athlete["id"]})
    assert response.status_code == 404


def test_athlete_cannot_pick_client(athlete, sign_up, client):
    other = sign_up("athlete")
    _post(client, athlete, "start")
    response = _post(client, athlete, "goals", {**GOALS_STEP, "clientId": other["id"]})
    assert response.status_code == 403
