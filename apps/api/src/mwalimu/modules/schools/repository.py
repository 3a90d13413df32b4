"""
School Repository

SQLAlchemy implementation of the school store.

Each operation opens its own session from the injected session factory, so
a cancelled request never leaves a half-finished transaction behind: the
session context rolls back anything not yet committed.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import func, select
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mwalimu.modules.schools.models import School
from mwalimu.modules.schools.store import SchoolRecord, StoreError, classify_store_failure

logger = logging.getLogger(__name__)


def _to_record(school: School) -> SchoolRecord:
    return SchoolRecord(id=str(school.id), name=school.name, county=school.county)


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _sqlstate(error: DBAPIError) -> str | None:
    """
    Extract the SQLSTATE code from a wrapped driver error.

    asyncpg (through SQLAlchemy's adapter) and psycopg expose `sqlstate`,
    psycopg2 exposes `pgcode`. The raw driver exception is also reachable
    through `__cause__`.
    """
    for candidate in (error.orig, getattr(error.orig, "__cause__", None)):
        if candidate is None:
            continue
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if isinstance(code, str) and code:
            return code
    return None


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    """Translate driver and transport failures into store errors."""
    try:
        yield
    except DBAPIError as e:
        sqlstate = _sqlstate(e)
        message = str(e.orig) if e.orig is not None else str(e)
        error_type = classify_store_failure(sqlstate, message)
        logger.error(f"School store {operation} failed (sqlstate={sqlstate}): {message}")
        raise error_type(message, code=sqlstate) from e
    except (SQLAlchemyError, OSError, TimeoutError) as e:
        logger.error(f"School store {operation} failed: {e}")
        raise StoreError(str(e)) from e


class SqlAlchemySchoolStore:
    """School store backed by the schools table."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker

    async def find_by_name(self, name: str, county: str) -> SchoolRecord | None:
        """
        Find a school by case-insensitive name within a county.

        Args:
            name: Trimmed school name
            county: Exact county name

        Returns:
            The matching record, or None if there is no match
        """
        # Lowercase both sides in the database, as uq_schools_county_lower_name does
        stmt = (
            select(School)
            .where(func.lower(School.name) == func.lower(name))
            .where(School.county == county)
            .limit(1)
        )
        with _store_errors("lookup"):
            async with self._session_maker() as session:
                result = await session.execute(stmt)
                school = result.scalars().first()

        return _to_record(school) if school is not None else None

    async def list_by_county(self, county: str, search: str | None = None) -> list[SchoolRecord]:
        """
        List the schools of a county ordered by name.

        Args:
            county: Exact county name
            search: Optional case-insensitive substring of the school name

        Returns:
            Records ordered by name ascending (database collation)
        """
        stmt = select(School).where(School.county == county)
        if search:
            stmt = stmt.where(School.name.ilike(f"%{_escape_like(search)}%", escape="\\"))
        stmt = stmt.order_by(School.name.asc())

        with _store_errors("list"):
            async with self._session_maker() as session:
                result = await session.execute(stmt)
                schools = result.scalars().all()

        return [_to_record(school) for school in schools]

    async def insert(self, name: str, county: str) -> SchoolRecord:
        """
        Insert a new school and commit it.

        Args:
            name: Trimmed school name
            county: County name

        Returns:
            The created record including its database-assigned id
        """
        with _store_errors("insert"):
            async with self._session_maker() as session:
                school = School(name=name, county=county)
                session.add(school)
                await session.flush()
                record = _to_record(school)
                await session.commit()

        logger.info(f"Created school: {record.id} - {record.name} ({record.county})")
        return record
