"""
Pytest configuration and fixtures for the portfolio API tests
"""

import os
import shutil
import tempfile

# Test environment must be in place before portfolio.config is imported
_TMP = tempfile.mkdtemp(prefix="portfolio-tests-")
TEST_DB_PATH = os.path.join(_TMP, "test.sqlite3")
os.environ["JWT_SECRET"] = "test-secret-that-is-long-enough-for-hs256-signing"
os.environ["DATABASE_URL"] = f"sqlite://{TEST_DB_PATH}"
os.environ["PHOTO_DIR"] = os.path.join(_TMP, "photos")
os.environ["APP_ENV"] = "test"
os.environ["METRICS_ENABLED"] = "1"

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from portfolio.main import app  # noqa: E402
from tests.helpers import TEST_PASSWORD, unique_email  # noqa: E402


def _reset_state():
    """Fresh database file and empty category folders for each test."""
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)
    store = app.state.photo_storage
    if store.base.exists():
        shutil.rmtree(store.base)
    store.ensure_layout()


@pytest.fixture
def photo_storage():
    return app.state.photo_storage


@pytest_asyncio.fixture
async def client():
    """Async client against the app, with startup and shutdown run around the test."""
    _reset_state()
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
            yield ac


@pytest.fixture
def sync_client():
    _reset_state()
    with TestClient(app) as tc:
        yield tc


@pytest_asyncio.fixture
async def admin(client):
    """Registered account plus its bearer headers."""
    email = unique_email()
    resp = await client.post("/api/register", json={"name": "Admin", "email": email, "password": TEST_PASSWORD})
    assert resp.status_code == 201
    resp = await client.post("/api/login", json={"email": email, "password": TEST_PASSWORD})
    assert resp.status_code == 200
    body = resp.json()
    return {
        "email": email,
        "user": body["user"],
        "token": body["token"],
        "headers": {"Authorization": f"Bearer {body['token']}"},
    }
