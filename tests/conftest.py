"""Shared pytest fixtures."""

from collections.abc import Iterator
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from moments.app import App
from moments.config import Config
from moments.core.core import Core
from moments.web.server import create_fastapi_app

TEST_PASSWORD = "correct horse"
TEST_SECRET = "test-signing-key-0123456789abcdef"
START_TIME = 1_700_000_000


class FrozenClock:
    """Manually advanced clock returning Unix seconds."""

    def __init__(self, start: int = START_TIME) -> None:
        self.current = start

    def __call__(self) -> int:
        return self.current

    def advance(self, seconds: int) -> None:
        self.current += seconds


def build_config(tmp_path, **overrides) -> Config:
    """Config isolated from the environment and any .env file."""
    values = {
        "auth_password": TEST_PASSWORD,
        "jwt_secret": TEST_SECRET,
        "session_expire_hours": 1,
        "uploads_path": str(tmp_path / "uploads"),
    }
    values.update(overrides)
    return Config(_env_file=None, **values)


def build_png(width: int = 4, height: int = 3) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (width, height), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def config(tmp_path):
    return build_config(tmp_path)


@pytest.fixture
def core(config, clock):
    """Core wired with the in-memory store, not started."""
    return Core(config, clock)


@pytest.fixture
def app_instance(config, clock):
    return App(config, clock)


@pytest.fixture
def client(app_instance, config) -> Iterator[TestClient]:
    """HTTP client over the full application, lifespan included."""
    with TestClient(create_fastapi_app(app_instance, config)) as test_client:
        yield test_client


@pytest.fixture
def logged_in_client(client):
    response = client.post("/api/auth/login", json={"password": TEST_PASSWORD})
    assert response.status_code == 200
    return client


@pytest.fixture
def make_config(tmp_path):
    """Factory for configs that differ from the default test config."""

    def factory(**overrides) -> Config:
        return build_config(tmp_path, **overrides)

    return factory


@pytest.fixture
def make_client(clock):
    """Factory for clients over an application built from a given config."""
    clients: list[TestClient] = []

    def factory(config: Config) -> TestClient:
        test_client = TestClient(create_fastapi_app(App(config, clock), config))
        test_client.__enter__()
        clients.append(test_client)
        return test_client

    yield factory
    for test_client in clients:
        test_client.__exit__(None, None, None)


@pytest.fixture
def png():
    return build_png()


@pytest.fixture
def password():
    return TEST_PASSWORD
