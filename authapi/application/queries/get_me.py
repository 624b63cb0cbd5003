"""GetMe query: identity fields of the authenticated user."""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from authapi.exceptions import InvalidTokenError
from authapi.models.auth import MeResponse
from authapi.services.user_service import UserService


@dataclass(frozen=True)
class GetMeQuery:
    user_id: UUID


class GetMeHandler:
    def __init__(self, user_service: Optional[UserService] = None) -> None:
        self.user_service = user_service or UserService()

    async def execute(self, query: GetMeQuery) -> MeResponse:
        user = await self.user_service.get_by_id(query.user_id)
        if user is None:
            raise InvalidTokenError("User not found")

        return MeResponse(
            email=user.email,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
        )
