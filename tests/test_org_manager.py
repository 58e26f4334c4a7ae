from __future__ import annotations

import asyncio

from sfbrowser.core.org_manager import OrgManager

from .fakes import FakeSource


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_org_info_is_cached_until_the_ttl_passes() -> None:
    source = FakeSource()
    clock = FakeClock()
    manager = OrgManager(source, ttl_s=60, clock=clock)

    first = asyncio.run(manager.get_org_info("dev"))
    again = asyncio.run(manager.get_org_info("dev"))
    assert again is first
    assert source.display_calls == ["dev"]

    clock.now = 61
    refreshed = asyncio.run(manager.get_org_info("dev"))
    assert refreshed.access_token == "token-2"


def test_force_refresh_bypasses_the_cache() -> None:
    source = FakeSource()
    manager = OrgManager(source)
    asyncio.run(manager.get_org_info("dev"))
    token = asyncio.run(manager.refresh_access_token("dev"))
    assert token == "token-2"


def test_clear_cache() -> None:
    source = FakeSource()
    manager = OrgManager(source)
    asyncio.run(manager.get_org_info("dev"))
    manager.clear_cache()
    asyncio.run(manager.get_org_info("dev"))
    assert len(source.display_calls) == 2


def test_list_orgs_and_frontdoor_pass_through() -> None:
    manager = OrgManager(FakeSource(aliases=["dev", "uat"]))
    orgs = asyncio.run(manager.list_orgs())
    assert [org.alias for org in orgs] == ["dev", "uat"]
    assert asyncio.run(manager.get_frontdoor_url("dev")).endswith("frontdoor.jsp?otp=one-time")
