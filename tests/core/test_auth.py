"""
Unit tests for bearer token authentication and reviewer access.
"""

from datetime import timedelta
from uuid import uuid4

import pytest
from fastapi import HTTPException

from unidoxia.core.auth import CurrentUser, _validate_jwt_token, get_current_reviewer
from unidoxia.core.security import create_access_token, decode_token


class TestTokens:
    def test_round_trip(self):
        user_id = str(uuid4())
        token = create_access_token(user_id, {"email": "a@b.co", "role": "staff"})

        payload = decode_token(token)

        assert payload["sub"] == user_id
        assert payload["role"] == "staff"
        assert payload["type"] == "access"

    def test_expired_token(self):
        token = create_access_token(str(uuid4()), expires_delta=timedelta(seconds=-5))
        assert decode_token(token) is None

    def test_garbage_token(self):
        assert decode_token("not-a-jwt") is None


class TestValidateJwtToken:
    @pytest.mark.asyncio
    async def test_builds_current_user(self):
        user_id = uuid4()
        token = create_access_token(
            str(user_id), {"email": "p@uni.ac.uk", "role": "partner", "name": "Pat"}
        )

        user = await _validate_jwt_token(token)

        assert user.id == user_id
        assert user.role == "partner"
        assert user.is_reviewer is True

    @pytest.mark.asyncio
    async def test_refresh_token_rejected(self):
        token = create_access_token(str(uuid4()), {"type": "refresh"})

        with pytest.raises(HTTPException) as exc_info:
            await _validate_jwt_token(token)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail["error"] == "INVALID_TOKEN_TYPE"

    @pytest.mark.asyncio
    async def test_invalid_subject(self):
        token = create_access_token("not-a-uuid")

        with pytest.raises(HTTPException) as exc_info:
            await _validate_jwt_token(token)

        assert exc_info.value.detail["error"] == "INVALID_TOKEN_CLAIMS"


class TestReviewerAccess:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", ["admin", "staff", "partner"])
    async def test_reviewer_roles_allowed(self, role):
        user = CurrentUser(id=uuid4(), email="x@y.z", role=role)
        assert await get_current_reviewer(user) is user

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", ["student", "agent"])
    async def test_other_roles_forbidden(self, role):
        user = CurrentUser(id=uuid4(), email="x@y.z", role=role)

        with pytest.raises(HTTPException) as exc_info:
            await get_current_reviewer(user)

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail["error"] == "REVIEWER_ACCESS_REQUIRED"
