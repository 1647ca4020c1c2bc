"""
Shared fixtures: isolated settings, a fresh in-memory store per test, and
an HTTP client wired to both.
"""

import pytest
from fastapi.testclient import TestClient

from jupiter.api.app import create_app
from jupiter.config import Settings
from jupiter.storage import create_local_storage


@pytest.fixture
def settings():
    """Test settings with cheap password hashing and fixed secrets."""
    return Settings(
        environment="test",
        jwt_access_secret="test-access-secret-0123456789abcdef",
        jwt_refresh_secret="test-refresh-secret-0123456789abcdef",
        password_hash_iterations=1_000,
        cors_origins="http://testserver",
    )


@pytest.fixture
def storage():
    return create_local_storage()


@pytest.fixture
def metadata(storage):
    return storage.metadata


@pytest.fixture
def client(storage, settings):
    with TestClient(create_app(storage=storage, settings=settings)) as c:
        yield c
