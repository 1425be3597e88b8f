"""Pytest configuration and fixtures."""
import os

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

os.environ.setdefault("APPER_MODE", "stub")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("LOCALE", "en")

from app.main import app, build_board  # noqa: E402
from app.config import settings  # noqa: E402
from app.crud.category import CRUDCategory  # noqa: E402
from app.crud.task import CRUDTask  # noqa: E402
from app.integrations.apper import ApperClient, default_stub_store  # noqa: E402
from app.services.auth_service import AuthSession  # noqa: E402
from app.services.notification_service import NotificationService  # noqa: E402

TEST_USER = {
    "userId": "u-1",
    "emailAddress": "ada@example.com",
    "firstName": "Ada",
    "lastName": "Lovelace",
}


@pytest.fixture
def store():
    """Empty stub record store with task and category schemas."""
    return default_stub_store()


@pytest.fixture
def apper_client(store):
    return ApperClient(mode="stub", store=store)


@pytest.fixture
def task_repo(apper_client):
    return CRUDTask(apper_client, settings.TASKS_TABLE, page_size=settings.TASK_PAGE_SIZE)


@pytest.fixture
def category_repo(apper_client):
    return CRUDCategory(apper_client, settings.CATEGORIES_TABLE, page_size=settings.CATEGORY_PAGE_SIZE)


@pytest.fixture
def notifier():
    return NotificationService(locale="en")


@pytest.fixture
def auth_session():
    return AuthSession()


@pytest.fixture
def board(apper_client, auth_session, notifier):
    """Board wired the same way as the application, not yet signed in."""
    return build_board(apper_client, auth_session, notifier)


@pytest_asyncio.fixture
async def signed_in_board(board, auth_session):
    """Board after a successful sign-in, collections loaded."""
    await auth_session.complete(TEST_USER, "/")
    return board


@pytest.fixture
def client(apper_client):
    """Test client backed by the stub store fixture."""
    app.state.apper_client = apper_client
    with TestClient(app) as test_client:
        yield test_client
    del app.state.apper_client


@pytest.fixture
def signed_in_client(client):
    response = client.post("/api/v1/auth/callback", json={"user": TEST_USER, "location": "/"})
    assert response.status_code == 200
    return client
