"""
Gauge policy: maps occupancy vs. capacity to a level and a percent.

The same rules are expressed twice, once for Python values and once as
SQLAlchemy expressions, so that persisted gauges and in-process derivations
never disagree. Thresholds come from settings (GAUGE_MEDIUM_PERCENT,
GAUGE_HIGH_PERCENT).

    g <= 0                  -> empty
    capacity unset or <= 0  -> unknown
    g >= capacity           -> full
    100*g >= high% * cap    -> high
    100*g >= medium% * cap  -> medium
    otherwise               -> low
"""

import enum
from typing import Optional
from sqlalchemy import case, null
from app.config import settings


class GaugeLevel(str, enum.Enum):
    EMPTY = "empty"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    FULL = "full"
    UNKNOWN = "unknown"


def _has_capacity(maximum: Optional[int]) -> bool:
    return maximum is not None and maximum > 0


def gauge_percent(current: int, maximum: Optional[int]) -> Optional[int]:
    """Occupancy in percent of capacity, rounded half-up and clamped to [0, 100]."""
    if not _has_capacity(maximum):
        return None
    current = max(0, current)
    if current >= maximum:
        return 100
    return (200 * current + maximum) // (2 * maximum)


def gauge_level(current: int, maximum: Optional[int],
                medium_percent: Optional[int] = None,
                high_percent: Optional[int] = None) -> GaugeLevel:
    medium_percent = medium_percent or settings.GAUGE_MEDIUM_PERCENT
    high_percent = high_percent or settings.GAUGE_HIGH_PERCENT

    if current <= 0:
        return GaugeLevel.EMPTY
    if not _has_capacity(maximum):
        return GaugeLevel.UNKNOWN
    if current >= maximum:
        return GaugeLevel.FULL
    if 100 * current >= high_percent * maximum:
        return GaugeLevel.HIGH
    if 100 * current >= medium_percent * maximum:
        return GaugeLevel.MEDIUM
    return GaugeLevel.LOW


def gauge_percent_sql(current, maximum):
    """SQL twin of gauge_percent(). Integer division only."""
    return case(
        (maximum.is_(None), null()),
        (maximum <= 0, null()),
        (current >= maximum, 100),
        else_=(current * 200 + maximum) // (maximum * 2),
    )


def gauge_level_sql(current, maximum,
                    medium_percent: Optional[int] = None,
                    high_percent: Optional[int] = None):
    """SQL twin of gauge_level()."""
    medium_percent = medium_percent or settings.GAUGE_MEDIUM_PERCENT
    high_percent = high_percent or settings.GAUGE_HIGH_PERCENT

    return case(
        (current <= 0, GaugeLevel.EMPTY.value),
        (maximum.is_(None), GaugeLevel.UNKNOWN.value),
        (maximum <= 0, GaugeLevel.UNKNOWN.value),
        (current >= maximum, GaugeLevel.FULL.value),
        (current * 100 >= maximum * high_percent, GaugeLevel.HIGH.value),
        (current * 100 >= maximum * medium_percent, GaugeLevel.MEDIUM.value),
        else_=GaugeLevel.LOW.value,
    )
