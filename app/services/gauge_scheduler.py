"""
Periodic gauge refresh.

Runs refresh_all_gauges every GAUGE_REFRESH_INTERVAL_SECONDS in a worker
thread, with a fresh DB session per run. Store outages back off
exponentially (max 5 minutes) instead of hammering the pool.
"""

import asyncio
from datetime import datetime
from app.config import settings
from app.database import SessionLocal
from app.errors import ResourceUnavailable
from app.services.gauge_service import refresh_all_gauges
from app.utils.logger import get_logger

logger = get_logger(__name__)

_MAX_BACKOFF = 300


def refresh_once(now: datetime = None) -> int:
    """One refresh with its own session. Blocking: call from a thread."""
    db = SessionLocal()
    try:
        return refresh_all_gauges(db, now or datetime.utcnow())
    finally:
        db.close()


async def run_gauge_refresher(interval: int = None):
    """Loop forever; cancelled at application shutdown."""
    interval = interval or settings.GAUGE_REFRESH_INTERVAL_SECONDS
    delay = interval
    logger.info(f"Gauge refresher started (every {interval}s)")

    while True:
        await asyncio.sleep(delay)
        try:
            await asyncio.to_thread(refresh_once)
            delay = interval
        except ResourceUnavailable as e:
            delay = min(delay * 2, _MAX_BACKOFF)
            logger.warning(f"Gauge refresh skipped: {e}. Retry in {delay}s")
        except Exception as e:
            logger.error(f"Gauge refresh failed: {e}", exc_info=True)
            delay = interval
