"""Shared time and distance utilities used across the scheduling core."""

import math

MINUTES_PER_DAY = 24 * 60
EARTH_RADIUS_KM = 6371.0


def time_to_minutes(value: str) -> int:
    """Convert an ``HH:MM`` clock string to minutes since midnight.

    Examples:
        >>> time_to_minutes("08:00")
        480
        >>> time_to_minutes("20:15")
        1215
    """
    hours, minutes = value.strip().split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(total_minutes: int) -> str:
    """Format minutes since midnight as ``HH:MM``, wrapping past midnight."""
    total_minutes %= MINUTES_PER_DAY
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def add_minutes(start: str, minutes: int) -> str:
    """Return the clock time ``minutes`` after ``start``.

    Wraps modulo 24h: a span that crosses midnight does not error.

    Examples:
        >>> add_minutes("09:00", 60)
        '10:00'
        >>> add_minutes("23:50", 20)
        '00:10'
    """
    return minutes_to_time(time_to_minutes(start) + minutes)


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two coordinates (haversine)."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c
