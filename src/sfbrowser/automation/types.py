from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any, Union

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ..core.errors import ErrorCode, SalesforceError, WaitTimeoutError, SCREENSHOT_HINT

NAVIGATION_HINT = "Try again or check your network connection."


class ToastType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Toast:
    type: ToastType
    message: str


@dataclass(frozen=True)
class TimedOut:
    """A wait whose timeout is an expected outcome rather than an error."""
    condition: str
    timeout_ms: int


ToastOutcome = Union[Toast, TimedOut]


class SaveStatus(str, Enum):
    SAVED = "saved"
    FAILED = "failed"
    UNVERIFIED = "unverified"


@dataclass
class SaveOutcome:
    status: SaveStatus
    message: str
    toast: Optional[Toast] = None

    @property
    def success(self) -> bool:
        return self.status != SaveStatus.FAILED


@dataclass
class ImagePayload:
    data: str
    mime_type: str = "image/png"


@dataclass
class ToolResult:
    """Structured response for one control-protocol operation."""
    success: bool
    message: str = ""
    data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[ErrorCode] = None
    suggestion: Optional[str] = None
    image: Optional[ImagePayload] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"success": self.success}
        if self.message:
            out["message"] = self.message
        out.update(self.data)
        if self.error is not None:
            out["error"] = self.error.value
        if self.suggestion:
            out["suggestion"] = self.suggestion
        if self.image is not None:
            out["image"] = {"data": self.image.data, "mimeType": self.image.mime_type}
        return out

    @classmethod
    def ok(cls, message: str = "", **data: Any) -> "ToolResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, code: ErrorCode, message: str, suggestion: Optional[str] = None, **data: Any) -> "ToolResult":
        return cls(success=False, message=message, error=code, suggestion=suggestion, data=data)

    @classmethod
    def from_exception(
        cls,
        exc: BaseException,
        action: str,
        timeout_code: Optional[ErrorCode] = None,
    ) -> "ToolResult":
        """Classify an exception raised while performing ``action``."""
        if isinstance(exc, WaitTimeoutError) and timeout_code == ErrorCode.NAVIGATION_TIMEOUT:
            # page readiness after a navigation counts as part of the navigation
            return cls.fail(timeout_code, exc.message, NAVIGATION_HINT)
        if isinstance(exc, SalesforceError):
            return cls.fail(exc.code, exc.message, exc.suggestion)

        message = str(exc) or exc.__class__.__name__
        is_timeout = isinstance(exc, PlaywrightTimeoutError) or "timeout" in message.lower()
        if is_timeout and timeout_code == ErrorCode.NAVIGATION_TIMEOUT:
            return cls.fail(
                timeout_code,
                "Navigation timed out. The page may be slow to load.",
                NAVIGATION_HINT,
            )
        if is_timeout and timeout_code is not None:
            return cls.fail(
                timeout_code,
                f"Element not found or not interactable during {action}",
                SCREENSHOT_HINT,
            )
        return cls.fail(ErrorCode.UNKNOWN_ERROR, f"Failed to {action}: {message}")
