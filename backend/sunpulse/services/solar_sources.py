"""
Source aggregator for the five SunPulse products.

Each public coroutine is fault-isolated: upstream timeouts, transport errors
and odd payloads fall back to documented defaults, so callers always get a
complete value. Only a bug in the assembly logic itself can escape, and
``fetch_snapshot`` even covers that with a static snapshot.
"""

import asyncio
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

from sunpulse.core.config import settings
from sunpulse.models.schemas import (
    AlertEntry,
    CmeEvent,
    ImageRef,
    ImageSet,
    Marker,
    Metrics,
    PlanetPosition,
    Snapshot,
)
from sunpulse.services import orbital
from sunpulse.services.fallback import PLACEHOLDER_IMAGE, FallbackResolver
from sunpulse.services.net import BoundedFetcher
from sunpulse.services.parsing import (
    DEFAULT_BZ,
    DEFAULT_KP,
    DEFAULT_WIND_SPEED,
    DEFAULT_XRAY_CLASS,
    Parsed,
    parse_bz,
    parse_kp,
    parse_wind_speed,
    parse_xray_class,
    to_float,
)
from sunpulse.services.pulse import pulse

logger = logging.getLogger(__name__)

T = TypeVar("T")

SWPC = settings.SWPC_BASE_URL
SDO = "https://sdo.gsfc.nasa.gov/assets/img/latest"

XRAY_SOURCE = f"{SWPC}/json/goes/primary/xray-flares-latest.json"
KP_SOURCE = f"{SWPC}/products/noaa-planetary-k-index.json"
SOLAR_WIND_SOURCE = f"{SWPC}/products/solar-wind/plasma-1-day.json"
MAG_SOURCE = f"{SWPC}/products/solar-wind/mag-1-day.json"
ALERTS_SOURCE = f"{SWPC}/json/alerts.json"
CME_SOURCE = f"{SWPC}/json/cme_analysis.json"
REGIONS_SOURCE = f"{SWPC}/json/solar_regions.json"
REGION_TEXT_SOURCE = f"{SWPC}/text/solar_regions.txt"

NEAR_NOW_IMAGES = [
    f"{SWPC}/images/animations/suvi/primary/195/latest.png",
    f"{SWPC}/images/animations/suvi/primary/193/latest.png",
    f"{SWPC}/images/animations/suvi/primary/171/latest.png",
    f"{SDO}/latest_1024_0193.jpg",
    f"{SDO}/latest_1024_0171.jpg",
]
FAR_IMAGES = [
    f"{SWPC}/images/synoptic_maps/sdo/hmi_mag/1024/latest.jpg",
    f"{SWPC}/images/synoptic_maps/sdo/hmi_mag/512/latest.jpg",
]

MAX_ALERTS = 10
MAX_CME_EVENTS = 5
MODERATE_HALF_ANGLE_DEG = 30.0

# e.g. "3664 S18W32" or "3664  N07 E112"
REGION_LINE_PATTERN = re.compile(r"(\d{4})\s+([NS]\d{2})\s*([EW]\d{2,3})")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def fallback_markers() -> List[Marker]:
    return [
        Marker(lat=12, lon=-45, strength=1.2),
        Marker(lat=-18, lon=72, strength=0.8),
    ]


def _positive(value: Any) -> Optional[float]:
    number = to_float(value)
    return number if number is not None and number > 0 else None


def _parse_time(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def map_alert(entry: Any) -> AlertEntry:
    entry = entry if isinstance(entry, dict) else {}
    return AlertEntry(
        text=str(entry.get("message") or entry.get("product_id") or "Solar alert"),
        level=str(entry.get("severity") or entry.get("event_type") or "info"),
        source=str(entry.get("source") or "NOAA SWPC"),
    )


def map_cme(entry: Any, now: datetime) -> CmeEvent:
    entry = entry if isinstance(entry, dict) else {}

    half_angle = to_float(entry.get("half_angle")) or to_float(entry.get("halfAngle")) or 0.0
    eta = _parse_time(entry.get("eta"))
    eta_hours = round((eta - now).total_seconds() / 3600.0, 1) if eta else None
    speed = to_float(entry.get("speed")) or to_float(entry.get("avgSpeed"))

    return CmeEvent(
        severity="moderate" if half_angle > MODERATE_HALF_ANGLE_DEG else "minor",
        eta_hours=eta_hours,
        earth_directed=bool(
            entry.get("isEarthDirected") or entry.get("earth_impact") or entry.get("earthDirected")
        ),
        target=str(entry.get("target_location") or "Earth"),
        impact_summary=f"Speed {round(speed)} km/s" if speed else "Speed unavailable",
    )


def markers_from_regions(regions: Any) -> List[Marker]:
    """Structured region feed; records without numeric in-range lat/lon are dropped."""
    if not isinstance(regions, list):
        return []
    markers = []
    for region in regions:
        if not isinstance(region, dict):
            continue
        lat, lon = region.get("latitude"), region.get("longitude")
        if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in (lat, lon)):
            continue
        if not (-90 <= lat <= 90 and -180 <= lon <= 180):
            continue
        strength = _positive(region.get("area")) or _positive(region.get("zurich_class")) or 1.0
        markers.append(Marker(lat=lat, lon=lon, strength=strength))
    return markers


def markers_from_text(text: str) -> List[Marker]:
    """Fixed-width SRS records: region number, N/S latitude, E/W longitude."""
    markers = []
    for line in text.splitlines():
        match = REGION_LINE_PATTERN.search(line)
        if not match:
            continue
        lat_str, lon_str = match.group(2), match.group(3)
        lat = int(lat_str[1:]) * (-1 if lat_str[0] == "S" else 1)
        lon = int(lon_str[1:]) * (1 if lon_str[0] == "E" else -1)
        if -90 <= lat <= 90 and -180 <= lon <= 180:
            markers.append(Marker(lat=lat, lon=lon, strength=1.0))
    return markers


def build_metrics(xray: Any, kp_rows: Any, plasma_rows: Any, mag_rows: Any, now: datetime) -> Metrics:
    xray_class = parse_xray_class(xray)
    kp = parse_kp(kp_rows)
    vsw = parse_wind_speed(plasma_rows)
    bz = parse_bz(mag_rows)

    for label, result in (("xray", xray_class), ("kp", kp), ("vsw", vsw), ("bz", bz)):
        if not isinstance(result, Parsed):
            logger.warning(f"Metric {label} unavailable, using default ({result.reason})")

    stamp = kp.stamp or xray_class.stamp or now.isoformat()
    xray_value = xray_class.value_or(DEFAULT_XRAY_CLASS)
    kp_value = kp.value_or(DEFAULT_KP)

    return Metrics(
        xray_class=xray_value,
        kp=kp_value,
        vsw=vsw.value_or(DEFAULT_WIND_SPEED),
        bz=bz.value_or(DEFAULT_BZ),
        stamp=stamp,
        pulse=pulse(xray_value, kp_value),
    )


def fallback_snapshot(now: Optional[datetime] = None) -> Snapshot:
    now = now or _utcnow()
    xray_class, kp = "B1.1", 2.0
    value = pulse(xray_class, kp)
    placeholder = ImageRef(url=PLACEHOLDER_IMAGE)
    return Snapshot(
        generated_at=int(now.timestamp() * 1000),
        images=ImageSet(near_now=placeholder, near_prev=placeholder, far=placeholder),
        metrics=Metrics(xray_class=xray_class, kp=kp, vsw=380.0, bz=-1.5, stamp=now.isoformat(), pulse=value),
        pulse=value,
        markers=fallback_markers(),
    )


class SolarSources:
    def __init__(
        self,
        fetcher: Optional[BoundedFetcher] = None,
        resolver: Optional[FallbackResolver] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.fetcher = fetcher or BoundedFetcher()
        self.resolver = resolver or FallbackResolver(self.fetcher)
        self.clock = clock

    async def _guarded(self, label: str, work: Awaitable[T], fallback: Callable[[], T]) -> T:
        try:
            return await work
        except Exception as e:
            logger.error(f"{label} failed, using fallback: {e!r}")
            return fallback()

    def near_prev_images(self) -> List[str]:
        an_hour_ago_ms = int((self.clock() - timedelta(hours=1)).timestamp() * 1000)
        return [
            f"{SWPC}/images/animations/suvi/primary/195/024hour/latest.png",
            f"{SWPC}/images/animations/suvi/primary/195/latest.png?cacheBust={an_hour_ago_ms}",
            f"{SDO}/latest_1024_0171.jpg",
        ]

    async def fetch_images(self) -> ImageSet:
        near_now, near_prev, far = await asyncio.gather(
            self.resolver.resolve(NEAR_NOW_IMAGES),
            self.resolver.resolve(self.near_prev_images()),
            self.resolver.resolve(FAR_IMAGES),
        )
        prev_url = near_now.url if near_prev.is_placeholder else near_prev.url
        return ImageSet(
            near_now=ImageRef(url=near_now.url),
            near_prev=ImageRef(url=prev_url),
            far=ImageRef(url=far.url),
        )

    async def fetch_metrics(self) -> Metrics:
        xray, kp_rows, plasma_rows, mag_rows = await asyncio.gather(
            self.fetcher.try_json(XRAY_SOURCE),
            self.fetcher.try_json(KP_SOURCE),
            self.fetcher.try_json(SOLAR_WIND_SOURCE),
            self.fetcher.try_json(MAG_SOURCE),
        )
        return build_metrics(xray, kp_rows, plasma_rows, mag_rows, self.clock())

    async def _markers(self) -> List[Marker]:
        markers = markers_from_regions(await self.fetcher.try_json(REGIONS_SOURCE))
        if markers:
            return markers

        logger.info("Structured region feed empty, trying text regions")
        text = await self.fetcher.try_text(REGION_TEXT_SOURCE)
        markers = markers_from_text(text) if text else []
        if markers:
            return markers

        logger.warning("No active regions available, using illustrative markers")
        return fallback_markers()

    def _default_metrics(self) -> Metrics:
        return build_metrics(None, None, None, None, self.clock())

    def _placeholder_images(self) -> ImageSet:
        placeholder = ImageRef(url=PLACEHOLDER_IMAGE)
        return ImageSet(near_now=placeholder, near_prev=placeholder, far=placeholder)

    async def fetch_snapshot(self) -> Snapshot:
        try:
            images, metrics, markers = await asyncio.gather(
                self._guarded("Imagery selection", self.fetch_images(), self._placeholder_images),
                self._guarded("Metrics fetch", self.fetch_metrics(), self._default_metrics),
                self._guarded("Markers fetch", self._markers(), fallback_markers),
            )
            return Snapshot(
                generated_at=int(self.clock().timestamp() * 1000),
                images=images,
                metrics=metrics,
                pulse=metrics.pulse,
                markers=markers,
            )
        except Exception as e:
            logger.error(f"Snapshot fetch failed, using fallback: {e!r}")
            return fallback_snapshot(self.clock())

    async def fetch_alerts(self) -> List[AlertEntry]:
        try:
            alerts = await self.fetcher.try_json(ALERTS_SOURCE)
            if not isinstance(alerts, list):
                return []
            return [map_alert(entry) for entry in alerts[-MAX_ALERTS:]]
        except Exception as e:
            logger.error(f"Alerts fetch failed: {e!r}")
            return []

    async def fetch_cme(self) -> List[CmeEvent]:
        try:
            events = await self.fetcher.try_json(CME_SOURCE)
            if not isinstance(events, list):
                return []
            now = self.clock()
            return [map_cme(entry, now) for entry in events[-MAX_CME_EVENTS:]]
        except Exception as e:
            logger.error(f"CME fetch failed: {e!r}")
            return []

    async def fetch_planets(self) -> List[PlanetPosition]:
        now = self.clock()
        try:
            return orbital.positions_at(now)
        except Exception as e:
            logger.error(f"Planet positions failed, retrying for a day earlier: {e!r}")
            return orbital.positions_at(now - timedelta(days=1))

    async def fetch_markers(self) -> List[Marker]:
        return await self._guarded("Markers fetch", self._markers(), fallback_markers)
