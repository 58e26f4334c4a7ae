"""Error taxonomy shared by the session, wait and pattern layers."""

from enum import Enum
from typing import Optional


SCREENSHOT_HINT = (
    "Verify the element is on the page and visible. "
    "Use sf_screenshot to inspect the current page state."
)


class ErrorCode(str, Enum):
    SESSION_NOT_STARTED = "SESSION_NOT_STARTED"
    SESSION_EXPIRED = "SESSION_EXPIRED"
    ORG_NOT_FOUND = "ORG_NOT_FOUND"
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    ELEMENT_NOT_FOUND = "ELEMENT_NOT_FOUND"
    NAVIGATION_TIMEOUT = "NAVIGATION_TIMEOUT"
    SF_CLI_ERROR = "SF_CLI_ERROR"
    INVALID_ARGUMENTS = "INVALID_ARGUMENTS"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class SalesforceError(Exception):
    """Base exception carrying a machine-readable code and a remediation hint."""

    code = ErrorCode.UNKNOWN_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        recoverable: bool = False,
        suggestion: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.recoverable = recoverable
        self.suggestion = suggestion


class SessionNotStartedError(SalesforceError):
    code = ErrorCode.SESSION_NOT_STARTED

    def __init__(self, message: str = "No active browser session. Call sf_session_start first."):
        super().__init__(
            message,
            suggestion="Use the sf_session_start tool to start a browser session.",
        )


class SessionExpiredError(SalesforceError):
    code = ErrorCode.SESSION_EXPIRED

    def __init__(self, message: str = "Browser session has expired or been closed."):
        super().__init__(
            message,
            recoverable=True,
            suggestion="Start a new session with sf_session_start.",
        )


class OrgNotFoundError(SalesforceError):
    code = ErrorCode.ORG_NOT_FOUND

    def __init__(self, org_alias: str):
        super().__init__(
            f'Org "{org_alias}" not found. Run "sf org list" to see available orgs.',
            suggestion="Verify the org alias is correct and the org is authenticated with SF CLI.",
        )
        self.org_alias = org_alias


class AuthenticationFailedError(SalesforceError):
    code = ErrorCode.AUTHENTICATION_FAILED

    def __init__(self, message: str):
        super().__init__(
            message,
            recoverable=True,
            suggestion='Try re-authenticating the org with "sf org login web".',
        )


class SalesforceCLIError(SalesforceError):
    """The sf executable failed or produced output that could not be parsed."""

    code = ErrorCode.SF_CLI_ERROR


class ElementNotFoundError(SalesforceError):
    """A composite UI interaction could not locate what it needed."""

    code = ErrorCode.ELEMENT_NOT_FOUND

    def __init__(self, action: str, target: str, message: Optional[str] = None):
        super().__init__(
            message or f'Could not {action}: "{target}" not found',
            suggestion=SCREENSHOT_HINT,
        )
        self.action = action
        self.target = target


class WaitTimeoutError(SalesforceError):
    """A hard wait condition was not satisfied before its deadline."""

    code = ErrorCode.ELEMENT_NOT_FOUND

    def __init__(self, condition: str, timeout_ms: int, code: Optional[ErrorCode] = None):
        if code == ErrorCode.NAVIGATION_TIMEOUT:
            suggestion = "The page may be slow to load. Try again or check your network connection."
        else:
            suggestion = SCREENSHOT_HINT
        super().__init__(
            f"Timeout {timeout_ms}ms exceeded waiting for {condition}",
            code=code,
            recoverable=True,
            suggestion=suggestion,
        )
        self.condition = condition
        self.timeout_ms = timeout_ms
