"""Domain errors raised by services and rendered by the app's exception handlers."""

from fastapi import status


class ServiceError(Exception):
    """Base for expected, caller-visible failures. Carries the HTTP status to report."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationError(ServiceError):
    """Malformed or out-of-range input that reached a service."""


class DuplicateNameError(ServiceError):
    def __init__(self, message: str = "Sweet with this name already exists") -> None:
        super().__init__(message)


class DuplicateEmailError(ServiceError):
    def __init__(self, message: str = "User with this email already exists") -> None:
        super().__init__(message)


class DuplicateUsernameError(ServiceError):
    def __init__(self, message: str = "User with this username already exists") -> None:
        super().__init__(message)


class InsufficientStockError(ServiceError):
    def __init__(self, message: str = "Insufficient quantity in stock") -> None:
        super().__init__(message)


class InvalidCredentialsError(ServiceError):
    """Unknown email and wrong password share this error and message."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


class UnauthorizedError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class InternalFaultError(ServiceError):
    """Storage or consistency failure not caused by caller input."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
