"""Shared fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api import dependencies as deps
from services.models import UserResponse


@pytest.fixture
def test_user():
    """Signed-in user returned by the overridden auth dependency."""
    return UserResponse(id="user-123", name="Test User", email="test@example.com")


@pytest.fixture
def service_overrides(test_config, user_store, mock_claude_client):
    """Dependency providers wired to test config, temp storage and a mock client."""

    def _service_kwargs():
        return {
            "config": test_config,
            "user_store": user_store,
            "client": mock_claude_client,
        }

    def _get_resume_service():
        from services import ResumeService
        return ResumeService(**_service_kwargs())

    def _get_ats_service():
        from services import AtsService
        return AtsService(**_service_kwargs())

    def _get_auth_service():
        from services import AuthService
        return AuthService(**_service_kwargs())

    return {
        deps.get_config: lambda: test_config,
        deps.get_user_store: lambda: user_store,
        deps.get_resume_service: _get_resume_service,
        deps.get_ats_service: _get_ats_service,
        deps.get_auth_service: _get_auth_service,
    }


@pytest.fixture
def app(service_overrides, test_user):
    """Create a FastAPI test app with injected dependencies."""
    application = create_app()
    application.dependency_overrides.update(service_overrides)

    # Override auth to accept any request as the test user
    from api.auth import verify_session_token

    async def _verify_test_user():
        return test_user

    application.dependency_overrides[verify_session_token] = _verify_test_user

    return application


@pytest.fixture
def real_auth_app(service_overrides):
    """App with services overridden but real bearer-token checks."""
    application = create_app()
    application.dependency_overrides.update(service_overrides)
    return application


@pytest.fixture
def client(app):
    """Create a test client."""
    return TestClient(app)
