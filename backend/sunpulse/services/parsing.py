"""
Typed parsing of loosely-shaped NOAA SWPC payloads.

Every parser returns either ``Parsed`` or ``Malformed``; callers pick the
value with ``value_or(DEFAULT_...)``. NOAA serves some products as an
array of arrays with a header row, and newer ones as an array of objects,
so both layouts are accepted. The newest parsable row wins.
"""

import math
from dataclasses import dataclass
from typing import Any, Generic, Iterable, Optional, Sequence, TypeVar, Union

T = TypeVar("T")

DEFAULT_XRAY_CLASS = "B1.0"
DEFAULT_KP = 2.0
DEFAULT_WIND_SPEED = 380.0  # km/s
DEFAULT_BZ = -1.0  # nT


@dataclass(frozen=True)
class Parsed(Generic[T]):
    value: T
    stamp: Optional[str] = None

    def value_or(self, default: T) -> T:
        return self.value


@dataclass(frozen=True)
class Malformed:
    reason: str
    stamp: Optional[str] = None

    def value_or(self, default: T) -> T:
        return default


ParseResult = Union[Parsed[T], Malformed]


def to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _newest_first(payload: Any) -> Optional[Sequence[Any]]:
    if not isinstance(payload, list) or not payload:
        return None
    return payload[::-1]


def _column(row: Any, index: Iterable[int], keys: Iterable[str]) -> Any:
    if isinstance(row, (list, tuple)):
        for i in index:
            if i < len(row) and row[i] is not None:
                return row[i]
        return None
    if isinstance(row, dict):
        for key in keys:
            if row.get(key) is not None:
                return row[key]
    return None


def _row_stamp(row: Any) -> Optional[str]:
    stamp = _column(row, (0,), ("time_tag",))
    return stamp if isinstance(stamp, str) else None


def _latest_number(payload: Any, index: Iterable[int], keys: Iterable[str], label: str) -> ParseResult[float]:
    rows = _newest_first(payload)
    if rows is None:
        return Malformed(f"{label}: expected a non-empty list")
    index, keys = tuple(index), tuple(keys)
    for row in rows:
        value = to_float(_column(row, index, keys))
        if value is not None:
            return Parsed(value, _row_stamp(row))
    return Malformed(f"{label}: no numeric rows")


def parse_xray_class(payload: Any) -> ParseResult[str]:
    """Latest GOES flare class from xray-flares-latest.json."""
    rows = _newest_first(payload)
    if rows is None:
        return Malformed("xray: expected a non-empty list")
    latest = rows[0]
    if not isinstance(latest, dict):
        return Malformed("xray: latest record is not an object")
    for key in ("xray_class", "max_class", "current_class"):
        value = latest.get(key)
        if isinstance(value, str) and value.strip():
            return Parsed(value.strip(), _row_stamp(latest))
    return Malformed("xray: no class field", _row_stamp(latest))


def parse_kp(payload: Any) -> ParseResult[float]:
    """Latest planetary K-index: [time_tag, Kp, ...] rows or {"Kp": ...} objects."""
    result = _latest_number(payload, (1,), ("Kp", "kp", "kp_index", "estimated_kp"), "kp")
    if isinstance(result, Parsed) and not 0.0 <= result.value <= 9.0:
        return Malformed(f"kp: {result.value} outside 0-9", result.stamp)
    return result


def parse_wind_speed(payload: Any) -> ParseResult[float]:
    """Latest bulk speed from plasma-1-day.json: [time_tag, density, speed, temperature]."""
    return _latest_number(payload, (2,), ("speed", "proton_speed"), "wind speed")


def parse_bz(payload: Any) -> ParseResult[float]:
    """
    Latest Bz (GSM) from mag-1-day.json: [time_tag, bx, by, bz, ...].

    Short [time_tag, bt, bz] rows carry Bz in column 2. In full rows column 2
    is By, so a null Bz there makes the row unparsable.
    """
    rows = _newest_first(payload)
    if rows is None:
        return Malformed("bz: expected a non-empty list")
    for row in rows:
        index = (2,) if isinstance(row, (list, tuple)) and len(row) <= 3 else (3,)
        value = to_float(_column(row, index, ("bz_gsm", "bz")))
        if value is not None:
            return Parsed(value, _row_stamp(row))
    return Malformed("bz: no numeric rows")
