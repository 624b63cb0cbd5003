"""Domain events raised by command handlers."""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class UserCreated:
    user_id: UUID
    email: str
    username: Optional[str]
    first_name: str
    last_name: str
    source: str


def publish(event: UserCreated) -> None:
    """Dispatch an event to its handlers. Welcome mail is not wired up; the event is logged."""
    logger.info(
        "user_created_event",
        user_id=str(event.user_id),
        email=event.email,
        username=event.username,
        source=event.source,
    )
