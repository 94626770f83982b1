"""Pytest fixtures for API tests."""

from dataclasses import dataclass, field

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr

from pazireshino.presentation.api.app import create_app
from pazireshino.presentation.api.config import API_V1_PREFIX
from pazireshino.presentation.api.dependencies import get_db_session, get_notifier
from pazireshino_config.settings import Settings


@dataclass
class RecordingNotifier:
    """Notifier double that keeps every reset URL it was asked to send."""

    fail_with: Exception | None = None
    sent: list[tuple[str, str]] = field(default_factory=list)

    def send_password_reset_email(self, to_email: str, reset_url: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append((to_email, reset_url))

    @property
    def last_secret(self) -> str:
        return self.sent[-1][1].rsplit("/", 1)[1]


@pytest.fixture
def users_url() -> str:
    return f"{API_V1_PREFIX}/users"


@pytest.fixture
def api_settings() -> Settings:
    """Test API settings."""
    return Settings(
        jwt_secret_key=SecretStr("test-jwt-secret-for-testing-only"),
        postgres_password=SecretStr("test-password"),
        environment="production",
        api_cors_origins="http://localhost:3000",
        password_hash_rounds=4,
        reset_url_base="https://api.pazireshino.test",
    )


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def app(api_settings, test_session_maker, notifier):
    app = create_app(settings=api_settings)

    async def override_get_db_session():
        async with test_session_maker() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_notifier] = lambda: notifier
    return app


@pytest.fixture
def test_client(app) -> TestClient:
    """Create a test client with an in-memory database."""
    return TestClient(app)


@pytest.fixture
def signup_data() -> dict:
    return {
        "firstName": "Sara",
        "lastName": "Ahmadi",
        "email": "sara@example.com",
        "phone": "09120000000",
        "password": "abc123",
        "passwordConfirm": "abc123",
    }


@pytest.fixture
def signed_up(test_client, users_url, signup_data) -> dict:
    """Sign a principal up and return the response body."""
    response = test_client.post(f"{users_url}/signup", json=signup_data)
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def auth_headers(signed_up) -> dict:
    return {"Authorization": f"Bearer {signed_up['token']}"}
