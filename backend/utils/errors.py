"""
Tagged error types shared by the service and HTTP layers.

Services raise these instead of bare exceptions so routers (and the
exception handlers registered in backend/main.py) can map an outcome to an
HTTP status by its kind rather than by comparing message strings.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation_error"
    NOT_FOUND = "not_found"
    UPSTREAM = "upstream_error"
    AUTH = "unauthorized"


HTTP_STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.AUTH: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UPSTREAM: 500,
}


class ServiceError(Exception):
    """Base class for errors raised by the service layer."""

    kind: ErrorKind = ErrorKind.UPSTREAM

    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    @property
    def status_code(self) -> int:
        return HTTP_STATUS_BY_KIND[self.kind]

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "success": False,
            "error": self.kind.value,
            "message": self.message,
        }
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(ServiceError):
    """Input failed a domain rule (missing name, malformed URL, too long...)."""

    kind = ErrorKind.VALIDATION


class NotFoundError(ServiceError):
    """The requested facility (or other row) does not exist."""

    kind = ErrorKind.NOT_FOUND


class UpstreamError(ServiceError):
    """Supabase, the crawl API or the text-generation API failed."""

    kind = ErrorKind.UPSTREAM


class AuthError(ServiceError):
    """Missing or invalid credentials."""

    kind = ErrorKind.AUTH
