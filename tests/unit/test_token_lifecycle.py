"""Login, refresh, and logout against an in-memory token table.

Exercises the real TokenService and AuthService so that the stored hash and
the tokens handed to clients are checked against each other.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from authapi.application.commands import (
    LoginCommand,
    LoginHandler,
    LogoutCommand,
    LogoutHandler,
    RefreshCommand,
    RefreshHandler,
)
from authapi.models.user import Role, User
from authapi.services.auth_service import AuthService, hash_refresh_token
from authapi.services.token_service import TokenService


class InMemoryTokenConnection:
    """Just enough of an asyncpg connection for the tokens table."""

    def __init__(self):
        self.rows = {}

    async def execute(self, sql, *args):
        if "INSERT INTO tokens" in sql:
            record_id, user_id, token_hash, now = args
            existing = self.rows.get(user_id)
            if existing is None:
                self.rows[user_id] = {
                    "id": record_id,
                    "user_id": user_id,
                    "refresh_token_hash": token_hash,
                    "locked": False,
                    "created_at": now,
                    "updated_at": now,
                }
            else:
                existing["refresh_token_hash"] = token_hash
                existing["updated_at"] = now
            return "INSERT 0 1"

        if "UPDATE tokens" in sql:
            now, user_id = args
            row = self.rows.get(user_id)
            if row is None:
                return "UPDATE 0"
            row["refresh_token_hash"] = None
            row["updated_at"] = now
            return "UPDATE 1"

        raise AssertionError(f"unexpected SQL: {sql}")

    async def fetchrow(self, sql, user_id):
        row = self.rows.get(user_id)
        return dict(row) if row is not None else None


class InMemoryPool:
    def __init__(self, conn):
        self.conn = conn

    def acquire(self):
        pool = self

        class _Acquire:
            async def __aenter__(self):
                return pool.conn

            async def __aexit__(self, *args):
                pass

        return _Acquire()


@pytest.fixture
def token_conn():
    conn = InMemoryTokenConnection()
    with patch(
        "authapi.services.token_service.get_pool",
        new_callable=AsyncMock,
        return_value=InMemoryPool(conn),
    ):
        yield conn


@pytest.fixture
def user():
    now = datetime.now(timezone.utc)
    return User(
        id=uuid4(),
        email="alice@example.com",
        username="alice",
        first_name="Alice",
        last_name="Smith",
        role=Role.USER,
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def user_service(user):
    auth_service = AuthService()
    service = MagicMock()
    service.get_by_identifier = AsyncMock(
        return_value=(user, auth_service.hash_password("correct-password"))
    )
    service.get_by_id = AsyncMock(return_value=user)
    return service


async def _login(user_service):
    handler = LoginHandler(user_service, AuthService(), TokenService())
    return await handler.execute(LoginCommand(identifier="alice", password="correct-password"))


async def test_stored_hash_matches_only_the_returned_refresh_token(token_conn, user_service, user):
    pair = await _login(user_service)
    token_service = TokenService()

    assert token_conn.rows[user.id]["refresh_token_hash"] == hash_refresh_token(pair.refresh_token)
    assert await token_service.verify_refresh_token(user.id, pair.refresh_token) is True
    assert await token_service.verify_refresh_token(user.id, pair.access_token) is False


async def test_second_login_supersedes_first(token_conn, user_service, user):
    first = await _login(user_service)
    second = await _login(user_service)
    token_service = TokenService()

    assert len(token_conn.rows) == 1
    assert await token_service.verify_refresh_token(user.id, first.refresh_token) is False
    assert await token_service.verify_refresh_token(user.id, second.refresh_token) is True


async def test_logout_invalidates_refresh_token(token_conn, user_service, user):
    pair = await _login(user_service)

    await LogoutHandler(TokenService()).execute(LogoutCommand(user_id=user.id))

    assert token_conn.rows[user.id]["refresh_token_hash"] is None
    assert await TokenService().verify_refresh_token(user.id, pair.refresh_token) is False


async def test_refresh_rotates_token(token_conn, user_service, user):
    original = await _login(user_service)

    rotated = await RefreshHandler(user_service, AuthService(), TokenService()).execute(
        RefreshCommand(user_id=user.id)
    )

    token_service = TokenService()
    assert rotated.refresh_token != original.refresh_token
    assert await token_service.verify_refresh_token(user.id, original.refresh_token) is False
    assert await token_service.verify_refresh_token(user.id, rotated.refresh_token) is True


async def test_locked_record_rejects_current_token(token_conn, user_service, user):
    pair = await _login(user_service)
    token_conn.rows[user.id]["locked"] = True

    assert await TokenService().verify_refresh_token(user.id, pair.refresh_token) is False
