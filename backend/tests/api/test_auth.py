"""
Tests for JWT authentication middleware and the error handler.
"""

import pytest

from api.errors import status_for
from api.middleware.auth import verify_token
from modules.auth.exceptions import ExpiredTokenError, InvalidTokenError
from modules.tasks.exceptions import TaskNotFoundError
from shared.exceptions import (
    AuthenticationError,
    BackendError,
    ConflictError,
    DecodingError,
    SparkTasksError,
    ValidationError,
)
from tests.conftest import create_test_token


class TestVerifyToken:
    def test_valid_token(self):
        user = verify_token(create_test_token(user_id="abc"))
        assert user.id == "abc"

    def test_expired_token(self):
        with pytest.raises(ExpiredTokenError):
            verify_token(create_test_token(expired=True))

    def test_garbage_token(self):
        with pytest.raises(InvalidTokenError):
            verify_token("not-a-jwt")

    def test_secret_not_configured(self, jwt_secret):
        jwt_secret.return_value.supabase_jwt_secret = ""
        with pytest.raises(AuthenticationError) as exc_info:
            verify_token(create_test_token())
        assert exc_info.value.code == "AUTH_NOT_CONFIGURED"


class TestProtectedRoutes:
    def test_missing_header(self, client):
        response = client.get("/api/tasks")
        assert response.status_code == 401
        assert response.json()["error"] == "MISSING_TOKEN"
        assert response.headers["www-authenticate"] == "Bearer"

    def test_expired_token(self, client):
        headers = {"Authorization": f"Bearer {create_test_token(expired=True)}"}
        response = client.get("/api/tasks", headers=headers)
        assert response.status_code == 401
        assert response.json()["error"] == "TOKEN_EXPIRED"

    def test_valid_token(self, client, auth_headers):
        response = client.get("/api/tasks", headers=auth_headers)
        assert response.status_code == 200


class TestErrorStatus:
    @pytest.mark.parametrize("error,status", [
        (AuthenticationError("x"), 401),
        (TaskNotFoundError("t"), 404),
        (ConflictError("x"), 409),
        (ValidationError("x"), 422),
        (BackendError("x", operation="list", collection="tasks"), 502),
        (DecodingError("habits", "h", "bad"), 502),
        (SparkTasksError("x"), 500),
    ])
    def test_status_by_family(self, error, status):
        assert status_for(error) == status
