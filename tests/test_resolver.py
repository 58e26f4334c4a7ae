from __future__ import annotations

import asyncio

from sfbrowser.automation.resolver import first_visible

from .fakes import FakePage


def test_first_visible_follows_candidate_order() -> None:
    page = FakePage(visible={"button.b", "button.a"})
    locator = asyncio.run(first_visible(page, ["button.a", "button.b"]))
    assert locator.key == "button.a"


def test_first_visible_returns_none_after_timeout() -> None:
    page = FakePage(visible=set())
    assert asyncio.run(first_visible(page, ["button.a"], timeout_ms=20, interval_ms=5)) is None


def test_late_candidate_is_found_while_polling() -> None:
    page = FakePage(visible=set())

    async def render() -> None:
        await asyncio.sleep(0.02)
        page.visible.add("button.b")

    async def run():
        found, _ = await asyncio.gather(first_visible(page, ["button.a", "button.b"], 200, 5), render())
        return found

    assert asyncio.run(run()).key == "button.b"
