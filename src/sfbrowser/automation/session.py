import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..core.config import ServerConfig
from ..core.errors import (
    AuthenticationFailedError,
    OrgNotFoundError,
    SalesforceCLIError,
    SessionExpiredError,
    SessionNotStartedError,
)
from ..core.models import OrgInfo, OrgSummary
from .engine import viewport_dict
from .selectors import LOGGED_IN_MARKER
from .urls import UrlBuilder, frontdoor_url
from .waits import LightningWaits, PageKind

logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


@dataclass
class SessionConfig:
    org_alias: str
    browser: Optional[str] = None
    headless: Optional[bool] = None
    viewport: Optional[Tuple[int, int]] = None


class SessionManager:
    """Owns the one browser, context and page of this process.

    Construct one per process and hand it to whatever dispatches operations.
    Starting a session always tears down the previous one first.
    """

    def __init__(self, org_manager, engine, config: Optional[ServerConfig] = None):
        self.org_manager = org_manager
        self.engine = engine
        self.config = config or ServerConfig()

        self.state = SessionStatus.DISCONNECTED
        self.org_alias: Optional[str] = None
        self.org_info: Optional[OrgInfo] = None
        self.instance_url: Optional[str] = None
        self.last_activity: Optional[datetime] = None

        self.browser = None
        self.context = None
        self.page = None
        self._url_builder: Optional[UrlBuilder] = None
        self._monitor: Optional[asyncio.Task] = None

    async def start_session(self, session_config: SessionConfig) -> None:
        await self.close_session()

        self.state = SessionStatus.CONNECTING
        self.org_alias = session_config.org_alias
        alias = session_config.org_alias
        logger.info(f"Starting session for {alias}")

        try:
            org_info = await self.org_manager.get_org_info(alias)
            self.org_info = org_info
            self.instance_url = org_info.instance_url
            self._url_builder = UrlBuilder(org_info.instance_url)

            entry_url = await self._entry_url(alias, org_info)

            browser = session_config.browser or self.config.default_browser
            headless = self.config.default_headless if session_config.headless is None else session_config.headless
            self.browser = await self.engine.launch(browser, headless)
            self.context = await self.browser.new_context(
                viewport=viewport_dict(session_config.viewport or self.config.default_viewport),
                user_agent=self.config.user_agent,
            )
            self.page = await self.context.new_page()

            await self.page.goto(
                entry_url,
                wait_until="domcontentloaded",
                timeout=self.config.navigation_timeout_ms,
            )
            await LightningWaits(self.page, self.config).wait_for_lightning_ready()
        except Exception as e:
            logger.warning(f"Session start for {alias} failed: {e}")
            self.state = SessionStatus.ERROR
            await self.close_session()
            if isinstance(e, OrgNotFoundError):
                raise OrgNotFoundError(alias) from e
            failure = AuthenticationFailedError(f"Failed to start session: {e}")
            if isinstance(e, SalesforceCLIError) and e.suggestion:
                # e.g. a missing sf binary; re-authenticating would not help
                failure.suggestion = e.suggestion
            raise failure from e

        self.state = SessionStatus.CONNECTED
        self.last_activity = datetime.now(timezone.utc)
        self._start_monitor()
        logger.info(f"Connected to {self.instance_url}")

    async def _entry_url(self, alias: str, org_info: OrgInfo) -> str:
        try:
            return await self.org_manager.get_frontdoor_url(alias)
        except SalesforceCLIError as e:
            # older sf releases lack --url-only; build frontdoor from the token instead
            logger.debug(f"sf org open failed ({e}), building frontdoor URL directly")
            return frontdoor_url(org_info.instance_url, org_info.access_token)

    async def ensure_session(self):
        """Return the live page or raise; the two errors call for different fixes."""
        if self.state != SessionStatus.CONNECTED or self.page is None:
            raise SessionNotStartedError()
        try:
            await self.page.evaluate("() => true")
        except Exception as e:
            logger.debug(f"Liveness probe failed: {e}")
            raise SessionExpiredError() from e
        self.last_activity = datetime.now(timezone.utc)
        return self.page

    def status(self) -> Dict[str, Any]:
        return {
            "status": self.state.value,
            "org_alias": self.org_alias,
            "instance_url": self.instance_url,
            "org_info": self.org_info,
            "last_activity": self.last_activity,
        }

    @property
    def url_builder(self) -> UrlBuilder:
        if self._url_builder is None or not self.instance_url:
            raise SessionNotStartedError("URL builder not available. Start a session first.")
        return self._url_builder

    async def refresh_token(self) -> bool:
        """Refetch credentials; re-run the frontdoor login only if the page lost its session.

        Returns True when the page had to be re-authenticated.
        """
        if not self.org_alias:
            raise SessionNotStartedError("No org alias set. Start a session first.")

        try:
            self.org_info = await self.org_manager.get_org_info(self.org_alias, force_refresh=True)
            if self.page is None:
                return False
            try:
                logged_in = await self.page.locator(LOGGED_IN_MARKER.css).first.is_visible()
            except Exception:
                logged_in = False
            if logged_in:
                return False

            logger.info(f"Page for {self.org_alias} lost its session, logging in again")
            entry_url = await self._entry_url(self.org_alias, self.org_info)
            await self.page.goto(entry_url, wait_until="domcontentloaded", timeout=self.config.navigation_timeout_ms)
            await LightningWaits(self.page, self.config).wait_for_lightning_ready()
            return True
        except Exception as e:
            raise SessionExpiredError(f"Failed to refresh token: {e}") from e

    async def close_session(self) -> None:
        """Release page, context and browser in that order. Never raises."""
        self._stop_monitor()

        for name in ("page", "context", "browser"):
            resource = getattr(self, name)
            if resource is None:
                continue
            try:
                await resource.close()
            except Exception as e:
                logger.warning(f"Failed to close {name}: {e}")
            setattr(self, name, None)

        try:
            await self.engine.stop()
        except Exception as e:
            logger.warning(f"Failed to stop browser engine: {e}")

        self.state = SessionStatus.DISCONNECTED
        self.org_alias = None
        self.org_info = None
        self.instance_url = None
        self.last_activity = None
        self._url_builder = None

    def _start_monitor(self) -> None:
        self._stop_monitor()
        self._monitor = asyncio.get_running_loop().create_task(self._monitor_credentials())

    def _stop_monitor(self) -> None:
        if self._monitor is not None:
            self._monitor.cancel()
            self._monitor = None

    async def _monitor_credentials(self) -> None:
        while True:
            await asyncio.sleep(self.config.token_refresh_interval_s)
            if self.state != SessionStatus.CONNECTED or not self.org_alias:
                continue
            try:
                await self.org_manager.get_org_info(self.org_alias, force_refresh=True)
                logger.debug(f"Refreshed credentials for {self.org_alias}")
            except Exception as e:
                logger.warning(f"Background credential refresh failed: {e}")

    # Page helpers

    async def navigate(self, path: str, smart_wait: bool = True) -> Optional[PageKind]:
        """Go to an instance-relative path, then wait the way the target URL calls for."""
        page = await self.ensure_session()
        url = self.url_builder.full_url(path)
        logger.debug(f"Navigating to {url}")
        await page.goto(url, wait_until="domcontentloaded", timeout=self.config.navigation_timeout_ms)
        if not smart_wait:
            return None
        return await LightningWaits(page, self.config).smart_wait()

    async def screenshot(self, full_page: bool = False, selector: Optional[str] = None) -> bytes:
        page = await self.ensure_session()
        if selector:
            return await page.locator(selector).first.screenshot()
        return await page.screenshot(full_page=full_page)

    async def evaluate(self, script: str) -> Any:
        page = await self.ensure_session()
        return await page.evaluate(script)

    async def current_url(self) -> str:
        page = await self.ensure_session()
        return page.url

    async def list_orgs(self) -> List[OrgSummary]:
        return await self.org_manager.list_orgs()
