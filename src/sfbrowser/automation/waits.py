"""
Readiness detection for Lightning pages.

Lightning boots several frameworks asynchronously and authenticates through a
chain of redirect domains, so no single browser event says "the page is
ready". Every wait here polls a predicate over the live page instead.

Two policies apply:

* best-effort waits (spinners, stencils, overlays) return ``False`` on timeout
  and never raise; a lingering decorative spinner rarely makes a page unusable.
* hard waits (shell, form, modal, toast, page markers) raise
  ``WaitTimeoutError`` once their deadline has passed, never before.

Chained sub-waits get a share of whatever budget remains when they start.
"""
import asyncio
import logging
from enum import Enum
from typing import Iterable, Mapping, Optional

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ..core.config import ServerConfig
from ..core.errors import ErrorCode, WaitTimeoutError
from . import selectors as sel
from .polling import Deadline, poll
from .resolver import first_visible
from .types import TimedOut, Toast, ToastOutcome, ToastType

logger = logging.getLogger(__name__)

# Answers "is any element matching one of these CSS selectors present and
# not hidden by display/visibility".
ANY_VISIBLE_SCRIPT = """
({ selectors }) => {
    for (const selector of selectors) {
        let nodes;
        try {
            nodes = document.querySelectorAll(selector);
        } catch (e) {
            continue;
        }
        for (const node of nodes) {
            const style = window.getComputedStyle(node);
            if (style.display !== 'none' && style.visibility !== 'hidden') {
                return true;
            }
        }
    }
    return false;
}
"""

# Intermediate hops of the frontdoor login flow
REDIRECT_MARKERS = ("frontdoor.jsp", "contentDoor", "file.force.com")
LIGHTNING_PATH = "/lightning/"

TOAST_PRIORITY = (ToastType.SUCCESS, ToastType.ERROR, ToastType.WARNING)
TOAST_MARKERS = {
    ToastType.SUCCESS: sel.TOAST_SUCCESS,
    ToastType.ERROR: sel.TOAST_ERROR,
    ToastType.WARNING: sel.TOAST_WARNING,
}

ELEMENT_SETTLE_MS = 100


class PageKind(str, Enum):
    FORM = "form"
    RECORD = "record"
    LIST = "list"
    SETUP = "setup"
    OTHER = "other"


def classify_page(url: str) -> PageKind:
    if "/lightning/r/" in url:
        return PageKind.FORM if "/edit" in url else PageKind.RECORD
    if "/lightning/o/" in url:
        return PageKind.FORM if "/new" in url else PageKind.LIST
    if "/lightning/setup/" in url:
        return PageKind.SETUP
    return PageKind.OTHER


def classify_toast(flags: Mapping[ToastType, bool]) -> ToastType:
    """First marker present in success, error, warning order wins; info otherwise."""
    for toast_type in TOAST_PRIORITY:
        if flags.get(toast_type):
            return toast_type
    return ToastType.INFO


def is_lightning_url(url: str) -> bool:
    if any(marker in url for marker in REDIRECT_MARKERS):
        return False
    return LIGHTNING_PATH in url


class LightningWaits:
    def __init__(self, page, config: Optional[ServerConfig] = None):
        self.page = page
        self.config = config or ServerConfig()

    @property
    def interval_ms(self) -> int:
        return self.config.poll_interval_ms

    # Probes

    async def any_visible(self, selectors: Iterable[str]) -> bool:
        return bool(await self.page.evaluate(ANY_VISIBLE_SCRIPT, {"selectors": list(selectors)}))

    async def poll_visible(self, query, deadline: Deadline, present: bool = True) -> bool:
        async def probe() -> bool:
            return await self.any_visible(query) == present

        return await poll(probe, deadline=deadline, interval_ms=self.interval_ms, label=query.name)

    async def _require_visible(
        self,
        query,
        timeout_ms: float,
        code: Optional[ErrorCode] = None,
        present: bool = True,
    ) -> Deadline:
        deadline = Deadline(timeout_ms)
        if not await self.poll_visible(query, deadline, present=present):
            condition = query.name if present else f"{query.name} to close"
            raise WaitTimeoutError(condition, int(timeout_ms), code)
        return deadline

    # Best-effort waits

    async def wait_for_no_spinners(self, timeout_ms: Optional[float] = None) -> bool:
        timeout_ms = self.config.spinner_timeout_ms if timeout_ms is None else timeout_ms
        return await self.poll_visible(sel.SPINNER, Deadline(timeout_ms), present=False)

    async def wait_for_no_stencils(self, timeout_ms: Optional[float] = None) -> bool:
        timeout_ms = self.config.spinner_timeout_ms if timeout_ms is None else timeout_ms
        return await self.poll_visible(sel.STENCIL, Deadline(timeout_ms), present=False)

    async def wait_for_page_interactable(self, timeout_ms: Optional[float] = None) -> bool:
        """No spinners, then no open backdrop for at most half the budget."""
        timeout_ms = self.config.spinner_timeout_ms if timeout_ms is None else timeout_ms
        deadline = Deadline(timeout_ms)
        spinners_gone = await self.wait_for_no_spinners(timeout_ms)
        no_overlay = await self.poll_visible(
            sel.BACKDROP, Deadline(deadline.share()), present=False
        )
        return spinners_gone and no_overlay

    # Bootstrap

    async def wait_for_lightning_ready(self, timeout_ms: Optional[float] = None) -> None:
        """Wait until the app shell has rendered after login or a hard navigation.

        Leaving the redirect chain, URL debounce and document load are best
        effort. Only a missing shell container is fatal.
        """
        timeout_ms = self.config.navigation_timeout_ms if timeout_ms is None else timeout_ms
        deadline = Deadline(timeout_ms)

        async def in_lightning() -> bool:
            return is_lightning_url(self.page.url)

        if not await poll(in_lightning, deadline=deadline, interval_ms=self.interval_ms, label="lightning url"):
            logger.debug(f"Still outside the lightning namespace at {self.page.url}")

        await self._wait_for_stable_url(deadline)

        try:
            await self.page.wait_for_load_state("domcontentloaded", timeout=max(deadline.remaining_ms, 1))
        except PlaywrightTimeoutError:
            logger.debug("domcontentloaded not reached, checking for the app shell anyway")

        if not await self.poll_visible(sel.APP_SHELL, deadline):
            raise WaitTimeoutError(sel.APP_SHELL.name + " to be visible", int(timeout_ms), ErrorCode.NAVIGATION_TIMEOUT)

        await self.wait_for_no_spinners(min(deadline.remaining_ms, self.config.spinner_timeout_ms))

    async def _wait_for_stable_url(self, deadline: Deadline) -> bool:
        last_url = self.page.url
        stable = 0
        while stable < self.config.url_stable_samples and not deadline.expired:
            await asyncio.sleep(min(self.config.url_sample_interval_ms, deadline.remaining_ms) / 1000)
            current = self.page.url
            if current == last_url:
                stable += 1
            else:
                logger.debug(f"URL moved to {current}")
                stable = 0
                last_url = current
        return stable >= self.config.url_stable_samples

    async def wait_for_navigation(self, timeout_ms: Optional[float] = None) -> None:
        timeout_ms = self.config.navigation_timeout_ms if timeout_ms is None else timeout_ms
        deadline = Deadline(timeout_ms)
        try:
            await self.page.wait_for_load_state("domcontentloaded", timeout=timeout_ms)
        except PlaywrightTimeoutError:
            raise WaitTimeoutError("page load", int(timeout_ms), ErrorCode.NAVIGATION_TIMEOUT)
        try:
            # Lightning long-polls, so networkidle may never come
            await self.page.wait_for_load_state("networkidle", timeout=max(deadline.share(0.5), 1))
        except PlaywrightTimeoutError:
            logger.debug("networkidle not reached")
        await self.wait_for_no_spinners(deadline.share(0.5))

    async def wait_for_url_contains(self, fragment: str, timeout_ms: Optional[float] = None) -> None:
        timeout_ms = self.config.navigation_timeout_ms if timeout_ms is None else timeout_ms

        async def probe() -> bool:
            return fragment in self.page.url

        if not await poll(probe, timeout_ms=timeout_ms, interval_ms=self.interval_ms, label=f"url {fragment}"):
            raise WaitTimeoutError(f'URL containing "{fragment}"', int(timeout_ms), ErrorCode.NAVIGATION_TIMEOUT)

    # Page-type waits

    async def wait_for_record_page(self, timeout_ms: Optional[float] = None) -> None:
        timeout_ms = self.config.page_timeout_ms if timeout_ms is None else timeout_ms
        deadline = await self._require_visible(sel.RECORD_PAGE_MARKERS, timeout_ms)
        await self.wait_for_no_spinners(deadline.share())
        await self.wait_for_no_stencils(deadline.share())

    async def wait_for_setup_page(self, timeout_ms: Optional[float] = None) -> None:
        timeout_ms = self.config.page_timeout_ms if timeout_ms is None else timeout_ms
        deadline = await self._require_visible(sel.SETUP_PAGE_MARKERS, timeout_ms)
        await self.wait_for_no_spinners(deadline.share())

    async def wait_for_list_view(self, timeout_ms: Optional[float] = None) -> None:
        timeout_ms = self.config.page_timeout_ms if timeout_ms is None else timeout_ms
        deadline = await self._require_visible(sel.LIST_VIEW_MARKERS, timeout_ms)
        await self.wait_for_no_spinners(deadline.share())
        await self.wait_for_no_stencils(deadline.share())

    async def wait_for_form_ready(self, timeout_ms: Optional[float] = None) -> None:
        timeout_ms = self.config.form_timeout_ms if timeout_ms is None else timeout_ms
        deadline = await self._require_visible(sel.FORM_MARKERS, timeout_ms)
        await self.wait_for_no_spinners(deadline.share())
        await self.wait_for_no_stencils(deadline.share(cap_ms=5000))

    async def smart_wait(self, timeout_ms: Optional[float] = None) -> PageKind:
        """Run exactly one readiness wait chosen from the current URL."""
        timeout_ms = self.config.smart_wait_timeout_ms if timeout_ms is None else timeout_ms
        kind = classify_page(self.page.url)
        logger.debug(f"Smart wait for {kind.value} page")
        if kind == PageKind.FORM:
            await self.wait_for_form_ready(timeout_ms)
        elif kind == PageKind.RECORD:
            await self.wait_for_record_page(timeout_ms)
        elif kind == PageKind.LIST:
            await self.wait_for_list_view(timeout_ms)
        elif kind == PageKind.SETUP:
            await self.wait_for_setup_page(timeout_ms)
        else:
            await self.wait_for_lightning_ready(timeout_ms)
        return kind

    # Components

    async def wait_for_modal(self, timeout_ms: Optional[float] = None) -> None:
        timeout_ms = self.config.modal_timeout_ms if timeout_ms is None else timeout_ms
        deadline = await self._require_visible(sel.MODAL, timeout_ms)
        await self.wait_for_no_spinners(deadline.share())

    async def wait_for_modal_close(self, timeout_ms: Optional[float] = None) -> None:
        timeout_ms = self.config.modal_timeout_ms if timeout_ms is None else timeout_ms
        await self._require_visible(sel.MODAL, timeout_ms, present=False)

    async def wait_for_picklist_options(self, timeout_ms: Optional[float] = None) -> None:
        timeout_ms = self.config.element_timeout_ms if timeout_ms is None else timeout_ms
        await self._require_visible(sel.COMBOBOX_ITEM, timeout_ms)

    async def wait_for_lookup_results(self, timeout_ms: Optional[float] = None) -> None:
        timeout_ms = self.config.element_timeout_ms if timeout_ms is None else timeout_ms
        deadline = await self._require_visible(sel.LOOKUP_RESULT, timeout_ms)
        await self.wait_for_no_spinners(deadline.share())

    async def wait_for_app_launcher(self, timeout_ms: Optional[float] = None) -> None:
        timeout_ms = self.config.launcher_timeout_ms if timeout_ms is None else timeout_ms
        await self._require_visible(sel.APP_LAUNCHER_SEARCH, timeout_ms)

    async def wait_for_element_stable(self, selector: str, timeout_ms: Optional[float] = None) -> None:
        timeout_ms = self.config.element_timeout_ms if timeout_ms is None else timeout_ms
        locator = self.page.locator(selector).first

        async def probe() -> bool:
            return await locator.is_visible()

        if not await poll(probe, timeout_ms=timeout_ms, interval_ms=self.interval_ms, label=selector):
            raise WaitTimeoutError(selector, int(timeout_ms))
        # let entry animations finish
        await asyncio.sleep(ELEMENT_SETTLE_MS / 1000)

    async def wait_for_component_render(
        self,
        component_selector: str,
        content_indicator: Optional[str] = None,
        timeout_ms: Optional[float] = None,
    ) -> None:
        timeout_ms = self.config.spinner_timeout_ms if timeout_ms is None else timeout_ms
        component = sel.query(component_selector, component_selector)
        deadline = await self._require_visible(component, timeout_ms)
        if content_indicator:
            nested = f"{component_selector} {content_indicator}"
            await self._require_visible(sel.query(nested, nested), deadline.share())
        await self.wait_for_no_spinners(deadline.share())

    # Toasts

    async def wait_for_toast(self, timeout_ms: Optional[float] = None) -> Toast:
        timeout_ms = self.config.toast_timeout_ms if timeout_ms is None else timeout_ms
        await self._require_visible(sel.TOAST_CONTAINER, timeout_ms)
        return await self.read_toast()

    async def toast_outcome(self, timeout_ms: Optional[float] = None) -> ToastOutcome:
        """Like ``wait_for_toast`` but a missing toast is a value, not an error."""
        timeout_ms = self.config.toast_timeout_ms if timeout_ms is None else timeout_ms
        try:
            return await self.wait_for_toast(timeout_ms)
        except WaitTimeoutError as e:
            return TimedOut(e.condition, e.timeout_ms)

    async def read_toast(self) -> Toast:
        """Read message and type from inside the visible toast, not the whole page."""
        toast = await first_visible(self.page, sel.TOAST_CONTAINER, 0, self.interval_ms)
        if toast is None:
            toast = self.page.locator(sel.TOAST_CONTAINER.css).first
        try:
            text = await toast.locator(sel.TOAST_MESSAGE.css).first.text_content(
                timeout=self.config.poll_interval_ms * 4
            )
        except PlaywrightTimeoutError:
            text = None

        flags = {}
        for toast_type in TOAST_PRIORITY:
            flags[toast_type] = await toast.locator(TOAST_MARKERS[toast_type].css).count() > 0
            if flags[toast_type]:
                break
        return Toast(classify_toast(flags), (text or "").strip())
