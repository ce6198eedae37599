"""
Cached read layer in front of the source aggregator.

Every read goes through the TTL cache with its endpoint's TTL. A producer
failure is re-raised as AggregationFailure carrying the fixed error code
the HTTP layer reports.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from sunpulse.core.config import CacheTTLs, settings
from sunpulse.core.errors import AggregationFailure
from sunpulse.models.schemas import AlertEntry, CmeEvent, Marker, PlanetPosition, Snapshot
from sunpulse.services.cache import TTLCache
from sunpulse.services.preferences import PreferenceStore
from sunpulse.services.solar_sources import SolarSources

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GatewayService:
    def __init__(
        self,
        sources: SolarSources,
        cache: TTLCache,
        ttls: Optional[CacheTTLs] = None,
        preferences: Optional[PreferenceStore] = None,
    ):
        self.sources = sources
        self.cache = cache
        self.ttls = ttls or settings.cache_ttls
        self.preferences = preferences or PreferenceStore()

    async def _read(self, key: str, producer: Callable[[], Awaitable[T]], ttl: float, error_code: str) -> T:
        try:
            return await self.cache.wrap(key, producer, ttl)
        except Exception as e:
            raise AggregationFailure(error_code) from e

    async def snapshot(self) -> Snapshot:
        return await self._read("snapshot", self.sources.fetch_snapshot, self.ttls.snapshot, "snapshot_unavailable")

    async def alerts(self) -> List[AlertEntry]:
        return await self._read("alerts", self.sources.fetch_alerts, self.ttls.alerts, "alerts_unavailable")

    async def cme(self) -> List[CmeEvent]:
        return await self._read("cme", self.sources.fetch_cme, self.ttls.cme, "cme_unavailable")

    async def planets(self) -> List[PlanetPosition]:
        return await self._read("planets", self.sources.fetch_planets, self.ttls.planets, "planets_unavailable")

    async def markers(self) -> List[Marker]:
        return await self._read("markers", self.sources.fetch_markers, self.ttls.markers, "markers_unavailable")

    def config(self) -> Dict[str, Any]:
        return self.preferences.get()

    def apply_config(self, incoming: Dict[str, Any]) -> Dict[str, Any]:
        return self.preferences.apply(incoming)

    def dispose(self) -> None:
        self.cache.clear()
        logger.info("Gateway disposed, cache cleared")
