"""Shared transaction handling for the store classes."""
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from skillshare.core.errors import StoreError, StoreErrorKind

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


def integrity_code(error: IntegrityError) -> str | None:
    """SQLSTATE of the driver error wrapped by an IntegrityError, if known."""
    orig = error.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def is_unique_violation(error: IntegrityError) -> bool:
    return integrity_code(error) == UNIQUE_VIOLATION


class Store:
    """Base for stores that own a request-scoped AsyncSession."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _commit(self, conflict: StoreErrorKind = StoreErrorKind.CONFLICT,
                      conflict_message: str | None = None) -> None:
        """Commit, translating storage failures into StoreError."""
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if is_unique_violation(e) or integrity_code(e) is None:
                logger.warning(f"Integrity violation on commit: {e.orig}")
                raise StoreError(conflict, conflict_message) from e
            logger.error(f"Integrity violation on commit: {e.orig}")
            raise StoreError(StoreErrorKind.DATABASE) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception(f"Database error on commit: {e}")
            raise StoreError(StoreErrorKind.DATABASE) from e

    async def _execute(self, statement):
        """Execute a statement, translating driver failures into StoreError."""
        try:
            return await self.session.execute(statement)
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception(f"Database error: {e}")
            raise StoreError(StoreErrorKind.DATABASE) from e
