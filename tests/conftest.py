"""
Shared fixtures.

End-to-end tests run the real application against a temporary SQLite
database, the in-memory session store and a temporary upload directory.
"""

from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient

from admit_portal.core.config import Settings
from admit_portal.core.sessions import MemorySessionStore
from admit_portal.main import create_app

# Smallest valid PNG (1x1 transparent pixel)
PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06"
    b"\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f\x00\x00\x01\x01"
    b"\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)

TEST_EMAIL = "user@example.com"
TEST_PASSWORD = "secret123"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_settings(tmp_path) -> Callable[..., Settings]:
    """Build settings pointing at temporary storage."""

    def _make(**overrides) -> Settings:
        values = {
            "python_env": "test",
            "database_url": f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
            "redis_url": None,
            "secret_key": "test-secret",
            "bcrypt_rounds": 4,
            "upload_dir": str(tmp_path / "uploads"),
            "storage_backend": "local",
            "application_variant": "full",
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def make_client(make_settings, clock):
    """
    Start the application and return a TestClient that does not follow
    redirects. Sessions use a fake clock so expiry can be tested.
    """
    clients = []

    def _make(**overrides) -> TestClient:
        settings = make_settings(**overrides)
        app = create_app(settings)
        client = TestClient(app, follow_redirects=False)
        client.__enter__()
        app.state.sessions = MemorySessionStore(
            settings.secret_key, settings.session_ttl_seconds, clock=clock
        )
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


def _signup(client: TestClient, email: str = TEST_EMAIL, password: str = TEST_PASSWORD):
    return client.post(
        "/signup",
        data={"email": email, "password": password, "confirmPassword": password},
    )


@pytest.fixture
def signup():
    """Post the sign-up form: ``signup(client, email=..., password=...)``."""
    return _signup


@pytest.fixture
def logged_in_client(client) -> TestClient:
    response = _signup(client)
    assert response.status_code == 303
    return client
