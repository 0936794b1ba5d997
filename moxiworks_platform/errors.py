"""Error types raised by the MoxiWorks Platform client."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class ErrorCode(Enum):
    """Platform error codes."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    REMOTE_REQUEST_FAILED = "REMOTE_REQUEST_FAILED"
    AUTHORIZATION_FAILED = "AUTHORIZATION_FAILED"


@dataclass(eq=False)
class PlatformError(Exception):
    """Base platform error with code and message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(PlatformError):
    """Raised before any request when a required field is missing or empty."""

    def __init__(self, field: str, message: Optional[str] = None) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_FAILED,
            message=message or f"{field} required",
        )
        self.field = field


class RemoteRequestFailure(PlatformError):
    """Raised when the platform reports a failed request."""

    def __init__(self, message: str, messages: Optional[List[str]] = None) -> None:
        super().__init__(
            code=ErrorCode.REMOTE_REQUEST_FAILED,
            message=message,
        )
        if isinstance(messages, str):
            messages = [messages]
        self.messages = list(messages or [])


class AuthorizationError(PlatformError):
    """Raised when platform credentials have not been configured."""

    def __init__(self, message: str = "platform credentials must be set before use") -> None:
        super().__init__(
            code=ErrorCode.AUTHORIZATION_FAILED,
            message=message,
        )
