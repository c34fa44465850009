"""Client-visible error kinds.

Every error raised from a route is an ``HTTPException`` so the handlers in
``formportal.main`` can render it inside the ``{success, message}`` envelope.
"""
from __future__ import annotations

from fastapi import HTTPException, status


class PortalError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Server error"

    def __init__(self, detail: str | None = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class BadRequest(PortalError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Bad request"


class Unauthorized(PortalError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Access token required"


class Forbidden(PortalError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Insufficient permissions"


class NotFound(PortalError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class Conflict(PortalError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"


# Distinct internally, identical on the wire: callers must not be able to
# tell another user's response apart from a missing one.
class ResponseNotFound(NotFound):
    default_detail = "Response not found"


class ResponseNotOwned(NotFound):
    default_detail = "Response not found"


_BY_STATUS = {
    400: BadRequest,
    401: Unauthorized,
    403: Forbidden,
    404: NotFound,
    409: Conflict,
}


def error_for_status(status_code: int, msg: str | None = None) -> PortalError:
    cls = _BY_STATUS.get(status_code, PortalError)
    return cls(msg)
