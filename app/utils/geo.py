"""
Great-circle helpers for proximity search.

Distances use the haversine formula on a sphere with the mean earth radius.
`distance_meters_sql` builds the same formula as a SQLAlchemy expression so
the store does the filtering and ordering; every input is a bound parameter.
"""

import math
from typing import Optional, Tuple
from sqlalchemy import Float, case, func

EARTH_RADIUS_METERS = 6371008.8
_BOX_PADDING_DEGREES = 1e-6
MAX_DISTANCE_METERS = math.pi * EARTH_RADIUS_METERS     # antipodal distance


def validate_coordinate(longitude: float, latitude: float) -> bool:
    return (
        longitude is not None and latitude is not None
        and math.isfinite(longitude) and math.isfinite(latitude)
        and -180.0 <= longitude <= 180.0
        and -90.0 <= latitude <= 90.0
    )


def distance_meters(lon1: float, lat1: float, lon2: float, lat2: float) -> float:
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(min(1.0, a)))


def distance_meters_sql(lon_col, lat_col, longitude: float, latitude: float):
    """SQL expression: distance in meters from (longitude, latitude) to the row's point."""
    half_dphi = func.radians(lat_col - latitude, type_=Float) / 2
    half_dlambda = func.radians(lon_col - longitude, type_=Float) / 2
    sin_dphi = func.sin(half_dphi, type_=Float)
    sin_dlambda = func.sin(half_dlambda, type_=Float)
    a = (
        sin_dphi * sin_dphi
        + func.cos(func.radians(latitude, type_=Float), type_=Float)
        * func.cos(func.radians(lat_col, type_=Float), type_=Float)
        * sin_dlambda * sin_dlambda
    )
    chord = func.sqrt(case((a > 1.0, 1.0), else_=a), type_=Float)
    return 2 * EARTH_RADIUS_METERS * func.asin(chord, type_=Float)


def bounding_box(longitude: float, latitude: float, radius_meters: float
                 ) -> Tuple[Optional[Tuple[float, float]], Optional[Tuple[float, float]]]:
    """
    Coarse (lat_range, lon_range) enclosing the search circle, for index use.
    A range is None when it cannot be expressed without wrapping (poles,
    antimeridian); the exact distance predicate still applies.
    """
    angular = radius_meters / EARTH_RADIUS_METERS
    dlat = math.degrees(angular) + _BOX_PADDING_DEGREES
    lat_min, lat_max = latitude - dlat, latitude + dlat
    if lat_min <= -90.0 or lat_max >= 90.0:
        return None, None

    ratio = math.sin(angular) / math.cos(math.radians(latitude))
    if angular >= math.pi / 2 or ratio >= 1.0:
        return (lat_min, lat_max), None
    dlon = math.degrees(math.asin(ratio)) + _BOX_PADDING_DEGREES
    lon_min, lon_max = longitude - dlon, longitude + dlon
    if lon_min < -180.0 or lon_max > 180.0:
        return (lat_min, lat_max), None
    return (lat_min, lat_max), (lon_min, lon_max)
