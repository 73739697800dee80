import uuid

from service_modules.auth_service import auth_service, SIGNED_IN, SIGNED_OUT, USER_UPDATED


def test_sign_up_returns_token_and_profile(client):
    email = f"New.User_{uuid.uuid4().hex[:6]}@Example.com"
    response = client.post("/api/auth/signup", json={
        "email": email,
        "password": "secret123",
        "name": "New User",
        "fitness_level": "intermediate",
        "fitness_goals": ["Build Muscle"],
    })
    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == email.lower()
    assert data["user"]["user_role"] == "athlete"
    assert data["user"]["subscription_tier"] == "free"
    assert data["user"]["fitness_goals"] == ["Build Muscle"]


def test_trainer_sign_up_keeps_trainer_fields(trainer, client):
    response = client.get("/api/profile", headers=trainer["headers"])
    assert response.status_code == 200
    data = response.json()
    assert data["user_role"] == "trainer"
    assert data["specialty"] == "Strength"
    assert data["fitness_level"] is None


def test_sign_up_duplicate_email(athlete, client):
    response = client.post("/api/auth/signup", json={
        "email": athlete["email"].upper(), "password": "secret123", "name": "Dup"
    })
    assert response.status_code == 400
    assert response.json()["detail"] == "Email already registered"


def test_sign_up_short_password(client):
    response = client.post("/api/auth/signup", json={
        "email": f"short_{uuid.uuid4().hex[:6]}@example.com", "password": "123", "name": "Short"
    })
    assert response.status_code == 400
    assert response.json()["detail"] == "Password should be at least 6 characters"


def test_sign_up_invalid_role(client):
    response = client.post("/api/auth/signup", json={
        "email": f"role_{uuid.uuid4().hex[:6]}@example.com", "password": "secret123",
        "name": "Owner", "user_role": "owner"
    })
    assert response.status_code == 400


def test_sign_in(athlete, client):
    response = client.post("/api/auth/signin", json={"email": athlete["email"], "password": athlete["password"]})
    assert response.status_code == 200
    assert response.json()["user"]["id"] == athlete["id"]
    assert "access_token" in response.cookies


def test_sign_in_wrong_password(athlete, client):
    response = client.post("/api/auth/signin", json={"email": athlete["email"], "password": "wrong-password"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


def test_access_without_token(anon_client):
    response = anon_client.get("/api/profile")
    assert response.status_code == 401


def test_access_with_bad_token(anon_client):
    response = anon_client.get("/api/profile", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_session_flags(premium_athlete, trainer, client):
    data = client.get("/api/auth/session", headers=premium_athlete["headers"]).json()
    assert data["is_athlete"] is True
    assert data["is_trainer"] is False
    assert data["has_active_subscription"] is True

    data = client.get("/api/auth/session", headers=trainer["headers"]).json()
    assert data["is_trainer"] is True
    assert data["has_active_subscription"] is False


def test_update_profile_is_partial(athlete, client):
    response = client.put("/api/profile", headers=athlete["headers"], json={"bio": "Runner"})
    assert response.status_code == 200
    data = response.json()
    assert data["bio"] == "Runner"
    assert data["name"] == "Test athlete"


def test_update_profile_invalid_level(athlete, client):
    response = client.put("/api/profile", headers=athlete["headers"], json={"fitness_level": "elite"})
    assert response.status_code == 400


def test_auth_events_are_emitted(client):
    events = []
    unsubscribe = auth_service.on_auth_state_change(lambda event, user_id: events.append((event, user_id)))
    try:
        response = client.post("/api/auth/signup", json={
            "email": f"events_{uuid.uuid4().hex[:6]}@example.com", "password": "secret123", "name": "Events"
        })
        user_id = response.json()["user"]["id"]
        headers = {"Authorization": f"Bearer {response.json()['access_token']}"}

        client.put("/api/profile", headers=headers, json={"name": "Renamed"})
        client.post("/api/auth/signout", headers=headers)
    finally:
        unsubscribe()

    assert events == [(SIGNED_IN, user_id), (USER_UPDATED, user_id), (SIGNED_OUT, user_id)]


def test_failing_listener_does_not_break_sign_out(athlete, client):
    def broken(event, user_id):
        raise RuntimeError("boom")

    unsubscribe = auth_service.on_auth_state_change(broken)
    try:
        response = client.post("/api/auth/signout", headers=athlete["headers"])
    finally:
        unsubscribe()
    assert response.status_code == 200
    assert response.json()["status"] == "success"


def test_shared_client_keeps_no_session_cookie(athlete, client):
    assert "access_token" not in client.cookies
    assert client.get("/api/profile").status_code == 401
