import logging
from typing import Optional

from playwright.async_api import async_playwright, Browser, Playwright

from ..core.config import BROWSERS

logger = logging.getLogger(__name__)


class PlaywrightEngine:
    """Starts the Playwright driver on first launch and keeps it until ``stop``."""

    def __init__(self):
        self._pw: Optional[Playwright] = None

    async def launch(self, browser: str = "chromium", headless: bool = False) -> Browser:
        if browser not in BROWSERS:
            raise ValueError(f"Unsupported browser '{browser}', expected one of {', '.join(BROWSERS)}")
        if self._pw is None:
            self._pw = await async_playwright().start()
        browser_type = getattr(self._pw, browser)
        logger.debug(f"Launching {browser} (headless={headless})")
        return await browser_type.launch(headless=headless)

    async def stop(self) -> None:
        if self._pw:
            await self._pw.stop()
        self._pw = None
