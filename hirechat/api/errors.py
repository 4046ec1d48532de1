"""Translation of service errors into HTTP responses."""

from fastapi import HTTPException

from hirechat.exceptions import HireChatError


def http_error(error: HireChatError) -> HTTPException:
    """Map a service error to an HTTPException carrying its user-facing message."""
    return HTTPException(status_code=error.status_code, detail=error.message)
