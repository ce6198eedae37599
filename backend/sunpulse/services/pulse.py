import math
import re
from typing import Optional

XRAY_SCALE = {
    "A": 1e-8,
    "B": 1e-7,
    "C": 1e-6,
    "M": 1e-5,
    "X": 1e-4,
}

XRAY_CLASS_PATTERN = re.compile(r"([A-Z])([0-9]+\.?[0-9]*)", re.IGNORECASE)

UNPARSABLE_PULSE = 0.15
DEFAULT_KP = 2.0
FLUX_WEIGHT = 0.7
KP_WEIGHT = 0.3


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def flux_term(xray_class: str) -> Optional[float]:
    """
    Normalized 0-1 flux for a GOES class string such as "M2.4";
    A1.0 (1e-8 W/m^2) maps to 0 and X1.0 (1e-4) to 1. None if unparsable.
    """
    match = XRAY_CLASS_PATTERN.search(xray_class or "")
    if not match:
        return None
    scale = XRAY_SCALE.get(match.group(1).upper(), XRAY_SCALE["A"])
    flux = scale * float(match.group(2))
    if flux <= 0:
        return 0.0
    return clamp((math.log10(flux) + 8.0) / 4.0, 0.0, 1.0)


def pulse(xray_class: str, kp: Optional[float] = None) -> float:
    """Activity pulse in [0, 1]: 70% X-ray flux, 30% Kp, rounded to 3 places."""
    flux = flux_term(xray_class)
    if flux is None:
        return UNPARSABLE_PULSE
    kp = DEFAULT_KP if kp is None else kp
    kp_term = clamp(kp / 9.0, 0.0, 1.0)
    return round(FLUX_WEIGHT * flux + KP_WEIGHT * kp_term, 3)
