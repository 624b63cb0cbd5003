"""Unit tests for TokenService with a mocked asyncpg pool."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from authapi.services.auth_service import hash_refresh_token
from authapi.services.token_service import TokenService


@pytest.fixture
def token_service():
    return TokenService()


def _token_row(user_id, refresh_token_hash=None, locked=False):
    now = datetime.now(timezone.utc)
    return {
        "id": uuid4(),
        "user_id": user_id,
        "refresh_token_hash": refresh_token_hash,
        "locked": locked,
        "created_at": now,
        "updated_at": now,
    }


class TestStoreRefreshToken:
    async def test_upserts_hash_not_raw_token(self, token_service, mock_pool):
        pool, conn = mock_pool
        conn.execute.return_value = "INSERT 0 1"
        user_id = uuid4()

        with patch("authapi.services.token_service.get_pool", new_callable=AsyncMock) as mock_get_pool:
            mock_get_pool.return_value = pool
            stored = await token_service.store_refresh_token(user_id, "raw-refresh-token")

        assert stored is True
        args = conn.execute.call_args[0]
        sql = args[0]
        assert "INSERT INTO tokens" in sql
        assert "ON CONFLICT (user_id)" in sql
        assert args[2] == user_id
        assert args[3] == hash_refresh_token("raw-refresh-token")
        assert "raw-refresh-token" not in args

    async def test_returns_false_when_not_acknowledged(self, token_service, mock_pool):
        pool, conn = mock_pool
        conn.execute.return_value = "INSERT 0 0"

        with patch("authapi.services.token_service.get_pool", new_callable=AsyncMock) as mock_get_pool:
            mock_get_pool.return_value = pool
            stored = await token_service.store_refresh_token(uuid4(), "raw")

        assert stored is False


class TestInvalidateRefreshToken:
    async def test_clears_hash(self, token_service, mock_pool):
        pool, conn = mock_pool
        conn.execute.return_value = "UPDATE 1"
        user_id = uuid4()

        with patch("authapi.services.token_service.get_pool", new_callable=AsyncMock) as mock_get_pool:
            mock_get_pool.return_value = pool
            cleared = await token_service.invalidate_refresh_token(user_id)

        assert cleared is True
        sql = conn.execute.call_args[0][0]
        assert "UPDATE tokens" in sql
        assert "refresh_token_hash = NULL" in sql
        assert conn.execute.call_args[0][2] == user_id

    async def test_no_record_returns_false(self, token_service, mock_pool):
        pool, conn = mock_pool
        conn.execute.return_value = "UPDATE 0"

        with patch("authapi.services.token_service.get_pool", new_callable=AsyncMock) as mock_get_pool:
            mock_get_pool.return_value = pool
            cleared = await token_service.invalidate_refresh_token(uuid4())

        assert cleared is False


class TestVerifyRefreshToken:
    async def _verify(self, token_service, pool, user_id, raw):
        with patch("authapi.services.token_service.get_pool", new_callable=AsyncMock) as mock_get_pool:
            mock_get_pool.return_value = pool
            return await token_service.verify_refresh_token(user_id, raw)

    async def test_matching_token(self, token_service, mock_pool):
        pool, conn = mock_pool
        user_id = uuid4()
        conn.fetchrow.return_value = _token_row(user_id, hash_refresh_token("the-token"))

        assert await self._verify(token_service, pool, user_id, "the-token") is True

    async def test_other_token_does_not_match(self, token_service, mock_pool):
        pool, conn = mock_pool
        user_id = uuid4()
        conn.fetchrow.return_value = _token_row(user_id, hash_refresh_token("the-token"))

        assert await self._verify(token_service, pool, user_id, "another-token") is False

    async def test_cleared_hash_never_matches(self, token_service, mock_pool):
        pool, conn = mock_pool
        user_id = uuid4()
        conn.fetchrow.return_value = _token_row(user_id, None)

        assert await self._verify(token_service, pool, user_id, "the-token") is False

    async def test_locked_record_never_matches(self, token_service, mock_pool):
        pool, conn = mock_pool
        user_id = uuid4()
        conn.fetchrow.return_value = _token_row(user_id, hash_refresh_token("the-token"), locked=True)

        assert await self._verify(token_service, pool, user_id, "the-token") is False

    async def test_missing_record(self, token_service, mock_pool):
        pool, conn = mock_pool
        conn.fetchrow.return_value = None

        assert await self._verify(token_service, pool, uuid4(), "the-token") is False


async def test_find_by_user_id_maps_row(token_service, mock_pool):
    pool, conn = mock_pool
    user_id = uuid4()
    conn.fetchrow.return_value = _token_row(user_id, "abc", locked=True)

    with patch("authapi.services.token_service.get_pool", new_callable=AsyncMock) as mock_get_pool:
        mock_get_pool.return_value = pool
        record = await token_service.find_by_user_id(user_id)

    assert record.user_id == user_id
    assert record.refresh_token_hash == "abc"
    assert record.locked is True
