"""
Error taxonomy for the gateway.

Timeouts and transport failures are recovered where they happen (fallback
chains, per-field defaults). Only AggregationFailure is allowed to reach the
HTTP boundary, where it becomes a 500 with a fixed error code.
"""


class SunPulseError(Exception):
    pass


class FetchTimeout(SunPulseError):
    """Deadline exceeded on a single outbound request."""

    def __init__(self, url: str, timeout: float):
        super().__init__(f"timed out after {timeout:g}s: {url}")
        self.url = url
        self.timeout = timeout


class TransportError(SunPulseError):
    """Network, DNS or connection failure below the HTTP layer."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"transport failure for {url}: {reason}")
        self.url = url
        self.reason = reason


class UpstreamFormatError(SunPulseError):
    """A successful response whose body has an unexpected shape."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"unexpected payload from {url}: {reason}")
        self.url = url
        self.reason = reason


class AggregationFailure(SunPulseError):
    def __init__(self, code: str):
        super().__init__(code)
        self.code = code


class InvalidPreferences(SunPulseError):
    """A client config that cannot be merged; the stored preferences are unchanged."""

    def __init__(self, reason: str):
        super().__init__(f"invalid preferences: {reason}")
        self.reason = reason
