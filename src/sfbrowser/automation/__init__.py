"""Browser automation layer for Salesforce Lightning.

This package holds the selector registry, the wait strategies that decide when
a Lightning page is usable, the UI pattern handlers built on them and the
session coordinator that owns the browser.
"""

from .types import SaveOutcome, SaveStatus, TimedOut, Toast, ToastType, ToolResult
from .engine import BrowserEngine
from .waits import LightningWaits, PageKind
from .patterns import FieldType, LightningPatterns
from .session import SessionConfig, SessionManager, SessionStatus
from .urls import UrlBuilder

__all__ = [
    'BrowserEngine',
    'FieldType',
    'LightningPatterns',
    'LightningWaits',
    'PageKind',
    'SaveOutcome',
    'SaveStatus',
    'SessionConfig',
    'SessionManager',
    'SessionStatus',
    'TimedOut',
    'Toast',
    'ToastType',
    'ToolResult',
    'UrlBuilder',
]
