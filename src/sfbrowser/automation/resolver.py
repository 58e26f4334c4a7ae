import logging
from typing import Iterable, Optional

from .polling import Deadline, poll

logger = logging.getLogger(__name__)


async def _is_visible(page, selector: str) -> bool:
    try:
        return await page.locator(selector).first.is_visible()
    except Exception as e:
        logger.debug(f"Visibility check failed for {selector}: {e}")
        return False


async def first_visible(page, candidates: Iterable[str], timeout_ms: float = 0, interval_ms: float = 250):
    """Return a locator for the first visible candidate, in candidate order.

    Each poll rescans the whole list from the top so a higher-priority
    candidate that renders late still wins over a lower one. Returns None
    when nothing is visible by the timeout.
    """
    ordered = list(candidates)
    found = {}

    async def probe() -> bool:
        for selector in ordered:
            if await _is_visible(page, selector):
                found["selector"] = selector
                return True
        return False

    if await poll(probe, deadline=Deadline(timeout_ms), interval_ms=interval_ms, label="visible candidate"):
        logger.debug(f"Resolved {found['selector']}")
        return page.locator(found["selector"]).first
    return None
