"""Register command: self-service account creation."""

from dataclasses import dataclass
from typing import Optional

from authapi.application.commands.create_user import CreateUserCommand, CreateUserHandler
from authapi.models.user import Role, User
from authapi.services.user_service import UserService


@dataclass(frozen=True)
class RegisterCommand:
    email: str
    password: str
    username: Optional[str] = None
    first_name: str = ""
    last_name: str = ""


class RegisterHandler:
    """Registration always creates a plain user."""

    def __init__(self, user_service: Optional[UserService] = None) -> None:
        self._create_user = CreateUserHandler(user_service)

    async def execute(self, command: RegisterCommand) -> User:
        return await self._create_user.execute(
            CreateUserCommand(
                email=command.email,
                password=command.password,
                username=command.username,
                first_name=command.first_name,
                last_name=command.last_name,
                role=Role.USER,
                source="register",
            )
        )
