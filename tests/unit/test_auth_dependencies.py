"""Unit tests for get_current_user_id and require_operator."""

from unittest.mock import patch

import pytest
from fastapi import HTTPException
from jose import jwt

from config.settings import settings
from src.bk_common.errors import OperatorRequiredError
from src.bk_gateway.auth.dependencies import get_current_user_id, require_operator
from src.bk_gateway.auth.jwt_handler import create_access_token


class TestGetCurrentUserId:
    @pytest.mark.asyncio
    async def test_returns_subject(self) -> None:
        assert await get_current_user_id(create_access_token("user-7")) == "user-7"

    @pytest.mark.asyncio
    async def test_invalid_token_is_401(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user_id("bad-token")
        assert exc_info.value.status_code == 401
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}

    @pytest.mark.asyncio
    async def test_missing_subject_is_401(self) -> None:
        token = jwt.encode({"type": "access"}, settings.JWT_SECRET, algorithm="HS256")
        with pytest.raises(HTTPException):
            await get_current_user_id(token)


class TestRequireOperator:
    @pytest.mark.asyncio
    async def test_operator_allowed(self) -> None:
        with patch.object(settings, "OPERATOR_USER_IDS", ["op-1"]):
            assert await require_operator("op-1") == "op-1"

    @pytest.mark.asyncio
    async def test_regular_user_rejected(self) -> None:
        with patch.object(settings, "OPERATOR_USER_IDS", ["op-1"]):
            with pytest.raises(OperatorRequiredError):
                await require_operator("user-1")
