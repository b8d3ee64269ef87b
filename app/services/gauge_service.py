"""
Gauge Updater: recomputes occupancy and derived gauge fields for every
enabled place in a single UPDATE statement.

The statement embeds the correlated aggregation from occupancy_service, so
there is no window where some places carry fresh gauges and others stale
ones, and concurrent refreshes serialize on the store's row locks.
Running it twice with the same `now` writes the same values.
"""

from datetime import datetime
from sqlalchemy import update
from sqlalchemy.orm import Session
from app.models.place import Place
from app.errors import store_errors
from app.services.gauge_policy import gauge_level_sql, gauge_percent_sql
from app.services.occupancy_service import active_count_sql
from app.utils.logger import get_logger

logger = get_logger(__name__)


def refresh_all_gauges(db: Session, now: datetime) -> int:
    """Persist current_gauge/level/percent as of `now`. Returns rows updated."""
    active = active_count_sql(Place.id, now)

    stmt = (
        update(Place)
        .where(Place.disabled.is_(False))
        .values(
            current_gauge=active,
            current_gauge_level=gauge_level_sql(active, Place.maximum_gauge),
            current_gauge_percent=gauge_percent_sql(active, Place.maximum_gauge),
        )
        .execution_options(synchronize_session=False)
    )

    with store_errors(db):
        rows = db.execute(stmt).rowcount
        db.commit()

    logger.info(f"[GAUGE] refreshed {rows} places as of {now.isoformat()}")
    return rows
