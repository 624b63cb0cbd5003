"""User API endpoints."""

import structlog
from fastapi import APIRouter, Depends, status

from authapi.api.dependencies import get_current_user, require_admin
from authapi.application.commands import CreateUserCommand, CreateUserHandler
from authapi.application.queries import GetMeHandler, GetMeQuery
from authapi.models.auth import CreateUserRequest, MeResponse, ProfileResponse, UserSummary
from authapi.models.user import User

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    request: CreateUserRequest,
    admin: User = Depends(require_admin),
) -> UserSummary:
    """Create a user with an explicit role (admin only).

    Raises:
        400: If the email or username is already taken
        403: If the caller is not an admin
    """
    user = await CreateUserHandler().execute(
        CreateUserCommand(
            email=request.email,
            password=request.password,
            username=request.username,
            first_name=request.first_name,
            last_name=request.last_name,
            role=request.role,
            source="admin",
        )
    )

    logger.info(
        "admin_created_user",
        admin_id=str(admin.id),
        new_user_id=str(user.id),
        role=user.role.value,
    )
    return UserSummary.from_user(user)


@router.get("/profile")
async def get_profile(current_user: User = Depends(get_current_user)) -> ProfileResponse:
    """Full profile of the authenticated user."""
    return ProfileResponse.from_user(current_user)


@router.get("/me")
async def get_me(current_user: User = Depends(get_current_user)) -> MeResponse:
    """Identity fields of the authenticated user."""
    return await GetMeHandler().execute(GetMeQuery(user_id=current_user.id))
