"""
Service Error Module

Every failure the core layers report is one of the exceptions below. The HTTP
layer maps them to status codes through a single exception handler registered
in app.main, so services never raise HTTPException themselves.
"""
from typing import Dict, Optional


class ServiceError(Exception):
    """Base class for errors surfaced to API callers."""
    status_code: int = 500
    default_detail: str = "Internal server error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return None


class NotFoundError(ServiceError):
    """A registry row or an entity does not exist."""
    status_code = 404
    default_detail = "Not found"


class ForbiddenError(ServiceError):
    """The caller exists but lacks the role required for the operation."""
    status_code = 403
    default_detail = "Not authorized"


class ValidationError(ServiceError):
    """Malformed input, e.g. an empty database name."""
    status_code = 422
    default_detail = "Invalid input"


class InvalidOperationError(ServiceError):
    """A well-formed request that conflicts with the current membership state."""
    status_code = 409
    default_detail = "Operation not allowed in the current state"


class InternalError(ServiceError):
    """I/O failure on a physical store or the snapshot store."""
    status_code = 500


class UnauthenticatedError(ServiceError):
    status_code = 401
    default_detail = "Not authenticated"

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return {"WWW-Authenticate": "Bearer"}
