# tests/conftest.py
"""
Shared fixtures for the SunPulse gateway suite.

- Registers Hypothesis profiles for local dev and CI.
- FakeUpstream: an httpx.MockTransport handler keyed by URL, so no test
  ever touches the network and every outbound request is recorded.
"""

import os
from datetime import datetime, timezone

import httpx
import pytest
from hypothesis import HealthCheck, settings

from sunpulse.services.net import BoundedFetcher
from sunpulse.services.solar_sources import SolarSources

settings.register_profile(
    "dev",
    settings(deadline=None, max_examples=60, suppress_health_check=[HealthCheck.too_slow]),
)
settings.register_profile(
    "ci",
    settings(deadline=None, max_examples=150, suppress_health_check=[HealthCheck.too_slow]),
)

_profile = "ci" if (os.getenv("CI") or os.getenv("GITHUB_ACTIONS")) else os.getenv("HYPOTHESIS_PROFILE", "dev")
settings.load_profile(_profile)

NOW = datetime(2024, 5, 10, 12, 0, tzinfo=timezone.utc)


class FakeUpstream:
    """
    routes maps a full URL to one of:
      (status, body)  body is JSON-encoded when it is a dict or list
      an exception    raised from the transport (e.g. httpx.ConnectError)
      a callable      called with the request; may be async
    Unknown URLs answer 404.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.requests = []

    def __call__(self, request: httpx.Request):
        self.requests.append((request.method, str(request.url)))
        route = self.routes.get(str(request.url))
        if route is None:
            return httpx.Response(404)
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(request)
        status, body = route
        if isinstance(body, (dict, list)):
            return httpx.Response(status, json=body)
        return httpx.Response(status, text=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def fetcher(self, **kwargs) -> BoundedFetcher:
        return BoundedFetcher(transport=self.transport, **kwargs)

    def urls(self, method=None):
        return [url for m, url in self.requests if method is None or m == method]


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def sources(upstream):
    return SolarSources(fetcher=upstream.fetcher(), clock=lambda: NOW)
