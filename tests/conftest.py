import os
import sys
import tempfile
import uuid

import pytest

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Must be set before `database` is imported anywhere
_db_dir = tempfile.mkdtemp(prefix="stheneco_test_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ["OPENAI_API_KEY"] = ""
os.environ["STRIPE_SECRET_KEY"] = ""
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test"

from fastapi.testclient import TestClient  # noqa: E402
from main import app  # noqa: E402


@pytest.fixture(scope="session")
def client():
    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_cookies(client):
    """Drop any `access_token` cookie a test left on the shared client."""
    yield
    client.cookies.clear()


@pytest.fixture
def anon_client():
    """A client with no stored auth cookie."""
    return TestClient(app)


def _sign_up(client, role="athlete", name=None, **extra):
    email = f"{role}_{uuid.uuid4().hex[:8]}@example.com"
    body = {"email": email, "password": "secret123", "name": name or f"Test {role}", "user_role": role}
    body.update(extra)
    response = client.post("/api/auth/signup", json=body)
    assert response.status_code == 200, response.text
    # Tests authenticate with explicit headers only
    client.cookies.clear()
    data = response.json()
    return {
        "id": data["user"]["id"],
        "email": email,
        "password": "secret123",
        "token": data["access_token"],
        "headers": {"Authorization": f"Bearer {data['access_token']}"},
    }


@pytest.fixture
def sign_up(client):
    """Factory: sign_up(role="athlete", **fields) -> {id, email, password, token, headers}."""
    def factory(role="athlete", **extra):
        return _sign_up(client, role=role, **extra)
    return factory


@pytest.fixture
def athlete(sign_up):
    return sign_up("athlete")


@pytest.fixture
def trainer(sign_up):
    return sign_up("trainer", specialty="Strength", experience_years=5)


@pytest.fixture
def premium_athlete(sign_up):
    from service_modules.subscription_service import subscription_service
    user = sign_up("athlete")
    subscription_service.update_subscription(user["id"], "premium", "active")
    return user
