"""Hand-written stand-ins for the Playwright page, the browser engine and the sf CLI.

A ``FakePage`` answers every probe from plain dictionaries keyed by selector,
so a test states what is on screen and then drives real waits and patterns
against it.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional, Set

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from sfbrowser.core.config import ServerConfig
from sfbrowser.core.errors import OrgNotFoundError, SalesforceCLIError
from sfbrowser.core.models import OrgInfo, OrgSummary

INSTANCE_URL = "https://acme.my.salesforce.com"
HOME_URL = INSTANCE_URL + "/lightning/page/home"


def fast_config(**overrides: Any) -> ServerConfig:
    """Config with timeouts small enough that a failing hard wait costs milliseconds."""
    fast = replace(
        ServerConfig(),
        navigation_timeout_ms=300,
        element_timeout_ms=100,
        spinner_timeout_ms=100,
        toast_timeout_ms=100,
        save_toast_timeout_ms=100,
        form_timeout_ms=150,
        page_timeout_ms=150,
        modal_timeout_ms=100,
        smart_wait_timeout_ms=200,
        launcher_timeout_ms=100,
        poll_interval_ms=5,
        url_sample_interval_ms=1,
        url_stable_samples=2,
        token_refresh_interval_s=3600,
    )
    return replace(fast, **overrides) if overrides else fast


class FakeKeyboard:
    def __init__(self, page: "FakePage") -> None:
        self.page = page

    async def press(self, key: str) -> None:
        self.page.keys.append(key)


class FakeMouse:
    def __init__(self, page: "FakePage") -> None:
        self.page = page

    async def wheel(self, dx: float, dy: float) -> None:
        self.page.wheels.append((dx, dy))


class FakeLocator:
    def __init__(self, page: "FakePage", selector: str, index: Optional[int] = None) -> None:
        self.page = page
        self.selector = selector
        self.index = index

    @property
    def key(self) -> str:
        if self.index is None:
            return self.selector
        return f"{self.selector}[{self.index}]"

    @property
    def first(self) -> "FakeLocator":
        return self

    @property
    def last(self) -> "FakeLocator":
        return self

    def nth(self, index: int) -> "FakeLocator":
        return FakeLocator(self.page, self.selector, index)

    def locator(self, selector: str) -> "FakeLocator":
        return FakeLocator(self.page, f"{self.key} {selector}")

    def _rendered(self) -> bool:
        if self.key in self.page.visible:
            return True
        # a selector list matches when any of its members does
        return self.index is None and any(part in self.page.visible for part in self.selector.split(", "))

    async def is_visible(self) -> bool:
        return self._rendered()

    async def is_checked(self) -> bool:
        return self.key in self.page.checked

    async def count(self) -> int:
        if self.key in self.page.counts:
            return self.page.counts[self.key]
        return 1 if self._rendered() else 0

    async def all(self) -> List["FakeLocator"]:
        return [self.nth(i) for i in range(await self.count())]

    async def all_text_contents(self) -> List[str]:
        return list(self.page.text_lists.get(self.key, []))

    async def text_content(self, timeout: Optional[float] = None) -> Optional[str]:
        return self.page.texts.get(self.key)

    async def input_value(self) -> str:
        return self.page.values.get(self.key, "")

    async def click(self, **kwargs: Any) -> None:
        if self.key in self.page.click_timeouts:
            raise PlaywrightTimeoutError(f"Timeout {kwargs.get('timeout')}ms exceeded.")
        self.page.clicks.append(self.key)
        callback = self.page.on_click.get(self.key)
        if callback:
            callback(self.page)

    async def fill(self, value: str) -> None:
        self.page.fills.append((self.key, value))

    async def clear(self) -> None:
        self.page.cleared.append(self.key)

    async def blur(self) -> None:
        self.page.blurred.append(self.key)

    async def hover(self) -> None:
        self.page.hovered.append(self.key)

    async def press(self, key: str) -> None:
        self.page.keys.append(f"{self.key}:{key}")

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        self.page.scripts.append((self.key, script, arg))
        return None

    async def wait_for(self, state: str = "visible", timeout: Optional[float] = None) -> None:
        if self._rendered() != (state in ("visible", "attached")):
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")

    async def screenshot(self) -> bytes:
        return b"element-png"


class FakePage:
    def __init__(self, url: str = HOME_URL, visible: Optional[Set[str]] = None) -> None:
        self.url = url
        # selectors (or "selector[index]" keys) currently rendered
        self.visible: Set[str] = set(visible if visible is not None else {"one-app"})
        self.checked: Set[str] = set()
        self.counts: Dict[str, int] = {}
        self.texts: Dict[str, str] = {}
        self.text_lists: Dict[str, List[str]] = {}
        self.values: Dict[str, str] = {}
        self.click_timeouts: Set[str] = set()
        self.on_click: Dict[str, Callable[["FakePage"], None]] = {}
        self.load_timeouts: Set[str] = set()
        # URL the browser lands on after following a goto, keyed by requested URL fragment
        self.redirects: Dict[str, str] = {"frontdoor.jsp": HOME_URL}

        self.clicks: List[str] = []
        self.fills: List[tuple] = []
        self.cleared: List[str] = []
        self.blurred: List[str] = []
        self.hovered: List[str] = []
        self.keys: List[str] = []
        self.wheels: List[tuple] = []
        self.scripts: List[tuple] = []
        self.gotos: List[str] = []
        self.load_states: List[str] = []
        self.eval_result: Any = True
        self.crashed = False
        self.closed = False
        self.keyboard = FakeKeyboard(self)
        self.mouse = FakeMouse(self)

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        if self.crashed:
            raise RuntimeError("Target page, context or browser has been closed")
        if isinstance(arg, dict) and "selectors" in arg:
            return any(selector in self.visible for selector in arg["selectors"])
        self.scripts.append((None, script, arg))
        return self.eval_result

    async def goto(self, url: str, wait_until: Optional[str] = None, timeout: Optional[float] = None) -> None:
        self.gotos.append(url)
        for fragment, landing in self.redirects.items():
            if fragment in url:
                self.url = landing
                return
        self.url = url

    async def wait_for_load_state(self, state: str = "load", timeout: Optional[float] = None) -> None:
        self.load_states.append(state)
        if state in self.load_timeouts:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")

    async def screenshot(self, full_page: bool = False) -> bytes:
        return b"full-png" if full_page else b"png"

    async def close(self) -> None:
        self.closed = True


class FakeContext:
    def __init__(self, page: FakePage) -> None:
        self.page = page
        self.options: Dict[str, Any] = {}
        self.closed = False

    async def new_page(self) -> FakePage:
        return self.page

    async def close(self) -> None:
        self.closed = True


class FakeBrowser:
    def __init__(self, page: FakePage) -> None:
        self.page = page
        self.contexts: List[FakeContext] = []
        self.closed = False

    async def new_context(self, **options: Any) -> FakeContext:
        context = FakeContext(self.page)
        context.options = options
        self.contexts.append(context)
        return context

    async def close(self) -> None:
        self.closed = True


class FakeEngine:
    def __init__(self, page: Optional[FakePage] = None) -> None:
        self.page = page or FakePage()
        self.launches: List[tuple] = []
        self.browsers: List[FakeBrowser] = []
        self.stops = 0

    async def launch(self, browser: str = "chromium", headless: bool = False) -> FakeBrowser:
        self.launches.append((browser, headless))
        fake = FakeBrowser(self.page)
        self.browsers.append(fake)
        return fake

    async def stop(self) -> None:
        self.stops += 1


class FakeSource:
    """Credential source answering from memory; ``open_url_error`` simulates an old sf release."""

    def __init__(self, aliases: Optional[List[str]] = None, open_url_error: bool = False) -> None:
        self.aliases = aliases if aliases is not None else ["dev"]
        self.open_url_error = open_url_error
        self.display_calls: List[str] = []

    def org_display(self, org_alias: str) -> OrgInfo:
        self.display_calls.append(org_alias)
        if org_alias not in self.aliases:
            raise OrgNotFoundError(org_alias)
        return OrgInfo(
            id="00D000000000001",
            access_token=f"token-{len(self.display_calls)}",
            instance_url=INSTANCE_URL,
            username=f"admin@{org_alias}.example",
            alias=org_alias,
            org_name="Acme",
        )

    def org_open_url(self, org_alias: str, target_path: Optional[str] = None) -> str:
        if self.open_url_error:
            raise SalesforceCLIError("Nonexistent flag: --url-only")
        return f"{INSTANCE_URL}/secur/frontdoor.jsp?otp=one-time"

    def org_list(self) -> List[OrgSummary]:
        return [
            OrgSummary(alias=alias, username=f"admin@{alias}.example", is_active=i == 0, org_id=f"00D{i}")
            for i, alias in enumerate(self.aliases)
        ]
