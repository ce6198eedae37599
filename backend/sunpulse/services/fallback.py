"""
First-reachable selection over an ordered list of candidate URLs.

Each candidate gets a cheap HEAD probe; if that does not confirm it, a GET
probe with a longer deadline whose body is discarded. The first confirmed
candidate wins. When none is reachable the inline placeholder image is
returned, so callers always get a usable URL.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence
from urllib.parse import quote

from sunpulse.core.config import settings
from sunpulse.core.errors import FetchTimeout, TransportError
from sunpulse.services.net import BoundedFetcher

logger = logging.getLogger(__name__)

_PLACEHOLDER_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 200 200">'
    '<defs><radialGradient id="g" cx="50%" cy="50%" r="50%">'
    '<stop offset="0%" stop-color="#ffd27d"/>'
    '<stop offset="60%" stop-color="#f3913d"/>'
    '<stop offset="100%" stop-color="#40230f"/>'
    "</radialGradient></defs>"
    '<rect width="200" height="200" fill="#02030a"/>'
    '<circle cx="100" cy="100" r="90" fill="url(#g)"/>'
    '<circle cx="140" cy="80" r="18" fill="rgba(255,255,255,0.28)"/>'
    '<circle cx="70" cy="130" r="12" fill="rgba(255,255,255,0.18)"/>'
    "</svg>"
)

PLACEHOLDER_IMAGE = "data:image/svg+xml;utf8," + quote(_PLACEHOLDER_SVG, safe="")


@dataclass(frozen=True)
class ProbeFailure:
    url: str
    method: str
    cause: str


@dataclass
class Resolution:
    url: str
    failures: List[ProbeFailure] = field(default_factory=list)

    @property
    def is_placeholder(self) -> bool:
        return self.url == PLACEHOLDER_IMAGE


class FallbackResolver:
    def __init__(
        self,
        fetcher: BoundedFetcher,
        head_timeout: float = settings.PROBE_HEAD_TIMEOUT_SECONDS,
        get_timeout: float = settings.PROBE_GET_TIMEOUT_SECONDS,
        placeholder: str = PLACEHOLDER_IMAGE,
    ):
        self.fetcher = fetcher
        self.head_timeout = head_timeout
        self.get_timeout = get_timeout
        self.placeholder = placeholder

    async def resolve(self, candidates: Sequence[str]) -> Resolution:
        failures: List[ProbeFailure] = []
        for url in candidates:
            if await self._probe(url, "HEAD", self.head_timeout, failures):
                return Resolution(url, failures)
            if await self._probe(url, "GET", self.get_timeout, failures):
                return Resolution(url, failures)

        if candidates:
            logger.warning(f"No reachable candidate among {len(candidates)}, using placeholder")
        return Resolution(self.placeholder, failures)

    async def _probe(self, url: str, method: str, timeout: float, failures: List[ProbeFailure]) -> bool:
        cause: Optional[str] = None
        try:
            response = await self.fetcher.fetch(url, method=method, timeout=timeout, read_body=False)
            if response.is_success:
                return True
            cause = f"HTTP {response.status_code}"
        except (FetchTimeout, TransportError) as e:
            cause = str(e)

        logger.warning(f"Image candidate {method} probe failed {url}: {cause}")
        failures.append(ProbeFailure(url, method, cause))
        return False
