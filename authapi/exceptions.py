"""Domain exceptions mapped to HTTP responses by the app exception handler."""

from fastapi import status


class AppError(Exception):
    """Base class for failures that carry their own HTTP status."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    error: str = "Bad request"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class InvalidCredentialsError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"

    def __init__(self, detail: str = "Invalid credentials") -> None:
        super().__init__(detail)


class InvalidTokenError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"

    def __init__(self, detail: str = "Invalid or expired token") -> None:
        super().__init__(detail)


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Forbidden"

    def __init__(self, detail: str = "Insufficient role") -> None:
        super().__init__(detail)


class UserAlreadyExistsError(AppError):
    """Duplicate email or username on registration or admin creation."""

    def __init__(self, detail: str = "User already exists") -> None:
        super().__init__(detail)


class PersistenceError(AppError):
    """A write the store did not acknowledge."""


class OAuthStateError(AppError):
    def __init__(self, detail: str = "Invalid or expired OAuth state") -> None:
        super().__init__(detail)


class OAuthProviderError(AppError):
    status_code = status.HTTP_502_BAD_GATEWAY
    error = "Bad gateway"

    def __init__(self, provider: str, reason: str) -> None:
        self.provider = provider
        super().__init__(f"OAuth provider error ({provider}): {reason}")


class ServiceUnavailableError(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error = "Service unavailable"
