"""
Heliocentric planet angles from Keplerian elements.

Elements and per-century rates are the J2000 approximate set
(Standish, JPL "Keplerian Elements for Approximate Positions of the Major
Planets", valid 1800-2050). Each row is [value at J2000, rate per Julian
century] for: a (AU), e, i (deg), L (deg), longitude of perihelion (deg),
longitude of ascending node (deg).
"""

import math
from datetime import datetime, timezone
from typing import Dict, List

import numpy as np

from sunpulse.models.schemas import PlanetPosition

TWO_PI = 2.0 * math.pi
J2000_JD = 2451545.0
UNIX_EPOCH_JD = 2440587.5
DAYS_PER_CENTURY = 36525.0

KEPLER_TOLERANCE = 1e-6
KEPLER_MAX_ITERATIONS = 15

PLANET_ELEMENTS: Dict[str, np.ndarray] = {
    "Mercury": np.array([
        [0.38709927, 0.00000037],
        [0.20563593, 0.00001906],
        [7.00497902, -0.00594749],
        [252.25032350, 149472.67411175],
        [77.45779628, 0.16047689],
        [48.33076593, -0.12534081],
    ]),
    "Venus": np.array([
        [0.72333566, -0.00000390],
        [0.00677672, -0.00004107],
        [3.39467605, -0.00078890],
        [181.97909950, 58517.81538729],
        [131.60246718, 0.00268329],
        [76.67984255, -0.27769418],
    ]),
    "Earth": np.array([
        [1.00000261, 0.00000562],
        [0.01671123, -0.00004392],
        [-0.00001531, -0.01294668],
        [100.46457166, 35999.37244981],
        [102.93768193, 0.32327364],
        [0.0, 0.0],
    ]),
    "Mars": np.array([
        [1.52371034, 0.00001847],
        [0.09339410, 0.00007882],
        [1.84969142, -0.00813131],
        [-4.55343205, 19140.30268499],
        [-23.94362959, 0.44441088],
        [49.55953891, -0.29257343],
    ]),
    "Jupiter": np.array([
        [5.20288700, -0.00011607],
        [0.04838624, -0.00013253],
        [1.30439695, -0.00183714],
        [34.39644051, 3034.74612775],
        [14.72847983, 0.21252668],
        [100.47390909, 0.20469106],
    ]),
    "Saturn": np.array([
        [9.53667594, -0.00125060],
        [0.05386179, -0.00050991],
        [2.48599187, 0.00193609],
        [49.95424423, 1222.49362201],
        [92.59887831, -0.41897216],
        [113.66242448, -0.28867794],
    ]),
    "Uranus": np.array([
        [19.18916464, -0.00196176],
        [0.04725744, -0.00004397],
        [0.77263783, -0.00242939],
        [313.23810451, 428.48202785],
        [170.95427630, 0.40805281],
        [74.01692503, 0.04240589],
    ]),
    "Neptune": np.array([
        [30.06992276, 0.00026291],
        [0.00859048, 0.00005105],
        [1.77004347, 0.00035372],
        [-55.12002969, 218.45945325],
        [44.96476227, -0.32241464],
        [131.78422574, -0.00508664],
    ]),
}

PLANET_NAMES = tuple(PLANET_ELEMENTS)


def normalize_degrees(angle: float) -> float:
    return angle % 360.0


def normalize_radians(angle: float) -> float:
    wrapped = angle % TWO_PI
    # x % 2pi can round up to exactly 2pi for tiny negative x
    return 0.0 if wrapped >= TWO_PI else wrapped


def julian_date(when: datetime) -> float:
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return when.timestamp() / 86400.0 + UNIX_EPOCH_JD


def julian_centuries(when: datetime) -> float:
    """Julian centuries elapsed since J2000.0."""
    return (julian_date(when) - J2000_JD) / DAYS_PER_CENTURY


def solve_kepler(
    mean_anomaly: float,
    eccentricity: float,
    tolerance: float = KEPLER_TOLERANCE,
    max_iterations: int = KEPLER_MAX_ITERATIONS,
) -> float:
    """
    Eccentric anomaly E for E - e*sin(E) = M, by Newton-Raphson from E = M.
    Stops at |dE| < tolerance or after max_iterations; the last iterate is
    returned either way.
    """
    E = mean_anomaly
    for _ in range(max_iterations):
        delta = (E - eccentricity * math.sin(E) - mean_anomaly) / (1.0 - eccentricity * math.cos(E))
        E -= delta
        if abs(delta) < tolerance:
            break
    return E


def planet_position(name: str, T: float) -> PlanetPosition:
    table = PLANET_ELEMENTS[name]
    a, e, i_deg, L, long_peri, long_node = table[:, 0] + table[:, 1] * T

    L = normalize_degrees(L)
    long_peri = normalize_degrees(long_peri)
    long_node = normalize_degrees(long_node)

    M = normalize_radians(math.radians(L - long_peri))
    E = solve_kepler(M, e)

    true_anomaly = 2.0 * math.atan2(
        math.sqrt(1.0 + e) * math.sin(E / 2.0),
        math.sqrt(1.0 - e) * math.cos(E / 2.0),
    )
    r = a * (1.0 - e * math.cos(E))
    # argument of latitude: true anomaly plus argument of perihelion
    u = true_anomaly + math.radians(long_peri - long_node)

    x_orb = r * math.cos(u)
    y_orb = r * math.sin(u)
    node = math.radians(long_node)
    inc = math.radians(i_deg)

    x = x_orb * math.cos(node) - y_orb * math.cos(inc) * math.sin(node)
    y = x_orb * math.sin(node) + y_orb * math.cos(inc) * math.cos(node)

    return PlanetPosition(
        name=name,
        semi_major_axis_au=float(a),
        angle_rad=normalize_radians(math.atan2(y, x)),
    )


def positions_at(when: datetime) -> List[PlanetPosition]:
    """Heliocentric ecliptic angles for the eight planets, in fixed order."""
    T = julian_centuries(when)
    return [planet_position(name, T) for name in PLANET_NAMES]
