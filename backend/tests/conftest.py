"""
TipShare Backend: Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own data file under pytest's tmp_path, so tests
       never share state and never touch ./data/data.json.

Fixture Hierarchy (all function-scoped):
    ├── data_file: Path of a not-yet-existing JSON document
    ├── store: JsonFileStore on that file (serialized policy)
    ├── signer: TokenSigner with a test-only secret
    ├── identity_service / tip_service: services wired to store + signer
    ├── app_settings / app: a FastAPI app built by create_app()
    ├── test_client: HTTPX AsyncClient talking to that app
    └── login_as: helper that registers + logs in over HTTP
"""

import os
import tempfile

# Override settings for testing BEFORE any app imports
os.environ["DATA_FILE"] = os.path.join(tempfile.mkdtemp(prefix="tipshare_test_"), "data.json")
os.environ["JWT_SECRET"] = "test-secret-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from tipshare.config import Settings
from tipshare.database import JsonFileStore
from tipshare.main import create_app
from tipshare.security import TokenSigner
from tipshare.services.auth_service import IdentityService
from tipshare.services.tip_service import TipService

TEST_SECRET = "unit-test-signing-key"


# ══════════════════════════════════════════════════════════════════════════
# Store & Service Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def data_file(tmp_path):
    """Location of the JSON document. The file itself does not exist yet."""
    return tmp_path / "db" / "data.json"


@pytest.fixture
def store(data_file):
    return JsonFileStore(path=str(data_file), concurrency_policy="serialized")


@pytest.fixture
def signer():
    return TokenSigner(secret=TEST_SECRET, ttl_seconds=3600)


@pytest.fixture
def identity_service(store, signer):
    return IdentityService(store=store, signer=signer)


@pytest.fixture
def tip_service(store):
    return TipService(store=store)


# ══════════════════════════════════════════════════════════════════════════
# HTTP Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app_settings(data_file):
    return Settings(
        data_file=str(data_file),
        jwt_secret=TEST_SECRET,
        log_level="WARNING",
    )


@pytest.fixture
def app(app_settings):
    return create_app(app_settings)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the ASGI app (no server).

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def login_as(test_client):
    """
    Register (ignoring "already taken") and log in; returns (token, user).

    Usage:
        token, user = await login_as("alice", "pw123")
    """

    async def _login(username, password, profile_picture=None):
        body = {"username": username, "password": password}
        if profile_picture is not None:
            body["profilePicture"] = profile_picture
        await test_client.post("/auth/register", json=body)
        response = await test_client.post(
            "/auth/login", json={"username": username, "password": password}
        )
        assert response.status_code == 200, response.text
        payload = response.json()
        return payload["token"], payload["user"]

    return _login
