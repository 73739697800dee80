from fastapi.testclient import TestClient
from main import app

client = TestClient(app)


def test_health():
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_responses_are_not_cached():
    response = client.get("/api/subscriptions/plans")
    assert "no-store" in response.headers["Cache-Control"]
    assert response.headers["Pragma"] == "no-cache"


def test_protected_routes_need_auth():
    for path in ("/api/profile", "/api/programs", "/api/trainer/clients", "/api/video/status"):
        assert client.get(path).status_code == 401
