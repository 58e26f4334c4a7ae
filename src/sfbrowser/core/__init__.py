"""sfbrowser core - configuration, error taxonomy and org credential caching."""

from .config import ServerConfig
from .errors import (
    ErrorCode,
    SalesforceError,
    SessionNotStartedError,
    SessionExpiredError,
    OrgNotFoundError,
    AuthenticationFailedError,
    SalesforceCLIError,
    ElementNotFoundError,
    WaitTimeoutError,
)
from .models import OrgInfo, OrgSummary
from .org_manager import OrgManager

__all__ = [
    'ServerConfig',
    'ErrorCode',
    'SalesforceError',
    'SessionNotStartedError',
    'SessionExpiredError',
    'OrgNotFoundError',
    'AuthenticationFailedError',
    'SalesforceCLIError',
    'ElementNotFoundError',
    'WaitTimeoutError',
    'OrgInfo',
    'OrgSummary',
    'OrgManager',
]
