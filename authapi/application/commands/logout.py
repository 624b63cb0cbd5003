"""Logout command: clear the stored refresh token hash."""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

import structlog

from authapi.exceptions import PersistenceError
from authapi.services.token_service import TokenService

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class LogoutCommand:
    user_id: UUID


class LogoutHandler:
    def __init__(self, token_service: Optional[TokenService] = None) -> None:
        self.token_service = token_service or TokenService()

    async def execute(self, command: LogoutCommand) -> bool:
        """Invalidate the user's refresh token.

        Raises:
            PersistenceError: No token record was cleared
        """
        cleared = await self.token_service.invalidate_refresh_token(command.user_id)
        if not cleared:
            raise PersistenceError("Failed to invalidate refresh token")

        logger.info("user_logged_out", user_id=str(command.user_id))
        return True
