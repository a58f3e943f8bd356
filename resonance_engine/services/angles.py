"""Angular helpers for ecliptic longitudes.

Longitudes are folded into [0, 360) and signed arcs into (-180, 180], so the
0°/360° seam never produces a half-turn jump.
"""

from __future__ import annotations


def normalize_longitude(lon: float) -> float:
    """Fold any finite angle into [0, 360)."""

    value = lon % 360.0
    # -1e-17 % 360.0 rounds to 360.0
    return 0.0 if value >= 360.0 else value


def shortest_delta(from_lon: float, to_lon: float) -> float:
    """Return the signed shortest arc from ``from_lon`` to ``to_lon``.

    The result is in the range (-180, 180]. Positive values mean ``to_lon``
    lies ahead of ``from_lon`` in zodiacal order.
    """

    delta = (to_lon - from_lon) % 360.0
    if delta > 180.0:
        delta -= 360.0
    return delta


def angular_separation(a: float, b: float) -> float:
    """Return the minimal angular distance between two longitudes, in [0, 180]."""

    return abs(shortest_delta(a, b))


def interpolate_longitude(before: float, after: float, t: float) -> float:
    """Linearly interpolate along the shortest arc between two longitudes.

    ``interpolate_longitude(350, 10, 0.5)`` is 0°, never 180°.

    Parameters
    ----------
    before
        Longitude at ``t == 0``.
    after
        Longitude at ``t == 1``.
    t
        Fraction of the way from ``before`` to ``after``; normally in [0, 1].
    """

    if t == 1.0:
        return normalize_longitude(after)
    return normalize_longitude(before + shortest_delta(before, after) * t)


__all__ = [
    "angular_separation",
    "interpolate_longitude",
    "normalize_longitude",
    "shortest_delta",
]
