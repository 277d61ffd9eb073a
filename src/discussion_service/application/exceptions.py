from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    code = "error"

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class NotFoundError(AppError):
    code = "not_found"


class ForbiddenError(AppError):
    code = "forbidden"


class ValidationError(AppError):
    code = "invalid_data"


class AuthenticationError(AppError):
    code = "unauthorized"


class RoomFullError(ForbiddenError):
    code = "room_full"


class UnavailableError(AppError):
    code = "unavailable"
