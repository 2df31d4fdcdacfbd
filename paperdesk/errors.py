"""
Error taxonomy shared by every service.

Each error carries a stable machine-readable kind plus an optional human
message. Clients branch on the kind, never on the message.
"""

from contextlib import contextmanager
from enum import Enum
from typing import Iterator, Optional

from paperdesk.logging_config import get_logger

logger = get_logger(__name__)


class ErrorKind(str, Enum):
    """Machine-readable error kinds."""
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    INVALID_INPUT = "INVALID_INPUT"
    UNAVAILABLE = "UNAVAILABLE"
    UNKNOWN = "UNKNOWN"


class StorageError(Exception):
    """Raised by document store drivers when the store cannot serve a call."""


class DuplicateKeyError(StorageError):
    """Raised on insert when the document id is already taken."""


class PaperDeskError(Exception):
    """Base error raised by the core services."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: Optional[str] = None):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message if self.message is not None else 'None'}"

    @property
    def retryable(self) -> bool:
        return self.kind == ErrorKind.UNAVAILABLE

    def to_response(self):
        """Render as the transport-facing error body."""
        from paperdesk.schemas.common import ErrorResponse

        return ErrorResponse(detail=self.message or self.kind.value, code=self.kind.value)


class UnauthorizedError(PaperDeskError):
    """Missing, invalid or expired token."""
    kind = ErrorKind.UNAUTHORIZED


class ForbiddenError(PaperDeskError):
    """Authenticated, but lacking the required capability."""
    kind = ErrorKind.FORBIDDEN


class NotFoundError(PaperDeskError):
    kind = ErrorKind.NOT_FOUND


class InvalidInputError(PaperDeskError):
    """Malformed pagination window, undecodable required cursor, bad input shape."""
    kind = ErrorKind.INVALID_INPUT


class UnavailableError(PaperDeskError):
    """Store or upstream failure. Safe for the caller to retry."""
    kind = ErrorKind.UNAVAILABLE


class UnknownError(PaperDeskError):
    kind = ErrorKind.UNKNOWN


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """
    Translate document store failures into UnavailableError.

    Usage:
        with storage_errors("find papers"):
            docs = await collection.find(...)
    """
    try:
        yield
    except (StorageError, ConnectionError, TimeoutError) as exc:
        logger.warning(
            "Storage call failed",
            extra={"operation": operation, "error": str(exc)},
        )
        raise UnavailableError(f"{operation} failed: {exc}") from exc
