"""Projection and area helpers. Setbacks and measurements are always in feet."""

import math

EARTH_RADIUS_FT = 20_902_231.0  # mean radius, 6 371 008.8 m
FT_PER_DEGREE = math.pi * EARTH_RADIUS_FT / 180.0


def lonlat_to_local_ft(
    lon: float,
    lat: float,
    origin: tuple[float, float],
) -> tuple[float, float]:
    """Project a lon/lat pair onto a local plane (feet) centred on origin.

    Equirectangular approximation: accurate to well under a foot at
    parcel scale, which is all setback checks need.
    """
    lon0, lat0 = origin
    x = (lon - lon0) * FT_PER_DEGREE * math.cos(math.radians(lat0))
    y = (lat - lat0) * FT_PER_DEGREE
    return x, y


def local_ft_to_lonlat(
    x: float,
    y: float,
    origin: tuple[float, float],
) -> tuple[float, float]:
    """Inverse of lonlat_to_local_ft."""
    lon0, lat0 = origin
    lon = lon0 + x / (FT_PER_DEGREE * math.cos(math.radians(lat0)))
    lat = lat0 + y / FT_PER_DEGREE
    return lon, lat


def area_ft2_to_acres(area_ft2: float) -> float:
    return area_ft2 / 43_560.0
