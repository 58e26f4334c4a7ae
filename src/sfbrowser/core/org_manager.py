import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .models import OrgInfo, OrgSummary

logger = logging.getLogger(__name__)

CACHE_TTL_S = 30 * 60


@dataclass
class CachedOrgInfo:
    org_info: OrgInfo
    cached_at: float
    expires_at: float


class OrgManager:
    """Caches org credentials per alias in front of a credential source.

    Entries older than the TTL are refetched lazily on the next read. Calls to
    the credential source are blocking process invocations, so they run in a
    worker thread to keep the event loop free.
    """

    def __init__(self, source, ttl_s: float = CACHE_TTL_S, clock: Callable[[], float] = time.monotonic):
        self.source = source
        self.ttl_s = ttl_s
        self._clock = clock
        self._cache: Dict[str, CachedOrgInfo] = {}

    async def get_org_info(self, org_alias: str, force_refresh: bool = False) -> OrgInfo:
        cached = self._cache.get(org_alias)
        now = self._clock()
        if not force_refresh and cached and cached.expires_at > now:
            return cached.org_info

        logger.debug(f"Fetching org info for {org_alias} (force_refresh={force_refresh})")
        org_info = await asyncio.to_thread(self.source.org_display, org_alias)
        now = self._clock()
        self._cache[org_alias] = CachedOrgInfo(
            org_info=org_info,
            cached_at=now,
            expires_at=now + self.ttl_s,
        )
        return org_info

    async def refresh_access_token(self, org_alias: str) -> str:
        org_info = await self.get_org_info(org_alias, force_refresh=True)
        return org_info.access_token

    async def get_frontdoor_url(self, org_alias: str, target_path: Optional[str] = None) -> str:
        return await asyncio.to_thread(self.source.org_open_url, org_alias, target_path)

    async def list_orgs(self) -> List[OrgSummary]:
        return await asyncio.to_thread(self.source.org_list)

    def clear_cache(self) -> None:
        self._cache.clear()
