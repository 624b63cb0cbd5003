"""Create-user command shared by self-registration and admin creation."""

from dataclasses import dataclass
from typing import Optional

import structlog

from authapi.application import events
from authapi.exceptions import UserAlreadyExistsError
from authapi.models.user import Role, User
from authapi.services.user_service import UserService

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CreateUserCommand:
    email: str
    password: str
    username: Optional[str] = None
    first_name: str = ""
    last_name: str = ""
    role: Role = Role.USER
    source: str = "admin"


class CreateUserHandler:
    """Reject duplicates, then create the user and publish UserCreated."""

    def __init__(self, user_service: Optional[UserService] = None) -> None:
        self.user_service = user_service or UserService()

    async def execute(self, command: CreateUserCommand) -> User:
        """Create a user.

        Raises:
            UserAlreadyExistsError: Email or username already taken; nothing is written
        """
        if await self.user_service.get_by_email(command.email) is not None:
            logger.warning("user_create_rejected", reason="email_taken")
            raise UserAlreadyExistsError("User already exists")

        if command.username and await self.user_service.get_by_username(command.username) is not None:
            logger.warning("user_create_rejected", reason="username_taken")
            raise UserAlreadyExistsError("Username already taken")

        user = await self.user_service.create_user(
            email=command.email,
            password=command.password,
            username=command.username,
            first_name=command.first_name,
            last_name=command.last_name,
            role=command.role,
        )

        events.publish(
            events.UserCreated(
                user_id=user.id,
                email=user.email,
                username=user.username,
                first_name=user.first_name,
                last_name=user.last_name,
                source=command.source,
            )
        )
        return user
