"""
Fixtures for API tests.

The app runs against the in-memory tables and a mocked identity provider;
JWT verification uses the test secret.
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import (
    get_account_view_model,
    get_connectivity_monitor,
    get_session_registry,
    reset_container,
)
from api.sessions import SessionRegistry, UserSession
from modules.profiles.viewmodel import ProfileViewModel
from tests.conftest import TEST_JWT_SECRET


@pytest.fixture(autouse=True)
def jwt_secret():
    """Verify bearer tokens with the test secret."""
    with patch("api.middleware.auth.get_settings") as mock_settings:
        mock_settings.return_value.supabase_jwt_secret = TEST_JWT_SECRET
        yield mock_settings


@pytest.fixture
def registry(identity, fake_db) -> SessionRegistry:
    return SessionRegistry(lambda user_id: UserSession(user_id, identity, fake_db))


@pytest.fixture
def monitor():
    monitor = MagicMock()
    monitor.is_configured = True
    monitor.is_running = True
    monitor.is_online = True
    return monitor


@pytest.fixture
def app(identity, fake_db, registry, monitor):
    """Create a fresh app for each test with its dependencies swapped out."""
    reset_container()
    app = create_app()
    app.dependency_overrides[get_session_registry] = lambda: registry
    app.dependency_overrides[get_connectivity_monitor] = lambda: monitor
    app.dependency_overrides[get_account_view_model] = lambda: ProfileViewModel(identity, fake_db)
    yield app
    app.dependency_overrides.clear()
    reset_container()


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client
