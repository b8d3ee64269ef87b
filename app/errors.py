"""
Error taxonomy of the check-in core.

Services raise only these types. Store errors are translated at the service
boundary by `store_errors()` so callers never see raw SQLAlchemy exceptions.
HTTP status mapping lives in app.main.
"""

from contextlib import contextmanager
from sqlalchemy import exc
from sqlalchemy.orm import Session
from app.utils.logger import get_logger

logger = get_logger(__name__)


class CoreError(Exception):
    """Base class for every error raised by the services."""


class NotFound(CoreError):
    """Entity absent, disabled, or not owned by the caller."""

    def __init__(self, name: str):
        super().__init__(f"{name} not found")
        self.name = name


class InvalidArgument(CoreError):
    """Caller-contract violation (bad radius, page size, coordinate...)."""


class ResourceUnavailable(CoreError):
    """Pool exhaustion or store timeout. Safe to retry."""


class InvariantViolation(CoreError):
    """Programmer error or corrupted state. Never retried."""


@contextmanager
def store_errors(db: Session):
    """Roll back and wrap any store error raised inside the block."""
    try:
        yield
    except CoreError:
        db.rollback()
        raise
    except (exc.TimeoutError, exc.OperationalError, exc.DisconnectionError) as e:
        db.rollback()
        logger.warning(f"Store unavailable: {e}")
        raise ResourceUnavailable("Store temporarily unavailable") from e
    except exc.IntegrityError as e:
        db.rollback()
        raise InvalidArgument("Data conflicts with existing records") from e
    except exc.SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Unexpected store error: {e}", exc_info=True)
        raise InvariantViolation("Unexpected store error") from e


def expect_one(count: int, name: str):
    """Check the row count of a conditional UPDATE."""
    if count == 0:
        raise NotFound(name)
    if count > 1:
        raise InvariantViolation(f"{name} update affected {count} rows")
