import logging
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

BROWSERS = ("chromium", "firefox", "webkit")


@dataclass(frozen=True)
class ServerConfig:
    """Runtime policy: browser defaults and per-operation timeouts (milliseconds)."""

    default_browser: str = "chromium"
    default_headless: bool = False
    default_viewport: Tuple[int, int] = (1920, 1080)
    user_agent: str = DEFAULT_USER_AGENT

    navigation_timeout_ms: int = 30000
    element_timeout_ms: int = 10000
    spinner_timeout_ms: int = 15000
    toast_timeout_ms: int = 10000
    save_toast_timeout_ms: int = 15000
    form_timeout_ms: int = 15000
    page_timeout_ms: int = 20000
    modal_timeout_ms: int = 10000
    smart_wait_timeout_ms: int = 15000
    launcher_timeout_ms: int = 10000

    poll_interval_ms: int = 250
    url_sample_interval_ms: int = 500
    url_stable_samples: int = 3

    token_refresh_interval_s: float = 30 * 60
    credential_ttl_s: float = 30 * 60
    sf_cli_path: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        env = os.environ if environ is None else environ
        config = cls()
        updates = {}

        browser = env.get("SFB_BROWSER")
        if browser:
            if browser.lower() in BROWSERS:
                updates["default_browser"] = browser.lower()
            else:
                logger.warning(f"Ignoring SFB_BROWSER={browser!r}, expected one of {', '.join(BROWSERS)}")

        headless = env.get("SFB_HEADLESS")
        if headless is not None:
            updates["default_headless"] = headless.strip().lower() in ("1", "true", "yes", "on")

        viewport = env.get("SFB_VIEWPORT")
        if viewport:
            try:
                width, height = viewport.lower().split("x", 1)
                updates["default_viewport"] = (int(width), int(height))
            except ValueError:
                logger.warning(f"Ignoring SFB_VIEWPORT={viewport!r}, expected WIDTHxHEIGHT")

        for var, attr in (
            ("SFB_NAVIGATION_TIMEOUT_MS", "navigation_timeout_ms"),
            ("SFB_ELEMENT_TIMEOUT_MS", "element_timeout_ms"),
            ("SFB_SPINNER_TIMEOUT_MS", "spinner_timeout_ms"),
            ("SFB_TOAST_TIMEOUT_MS", "toast_timeout_ms"),
        ):
            raw = env.get(var)
            if not raw:
                continue
            try:
                value = int(raw)
            except ValueError:
                logger.warning(f"Ignoring {var}={raw!r}, expected an integer")
                continue
            if value <= 0:
                logger.warning(f"Ignoring {var}={raw!r}, expected a positive value")
                continue
            updates[attr] = value

        sf_path = env.get("SFB_SF_PATH")
        if sf_path:
            updates["sf_cli_path"] = sf_path

        return replace(config, **updates) if updates else config
