"""
School Registry Background Jobs

Resolution only deduplicates schools eventually: two sign-ups racing on the
same new school can both create it when the database lacks the unique
index. This job reports such duplicates so they can be merged by hand.

Schedule:
- Runs hourly; can also be triggered manually via the debug endpoints
"""

import logging
from typing import Any

from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mwalimu.core.scheduler import JobScheduler
from mwalimu.modules.schools.models import School

logger = logging.getLogger(__name__)

JOB_ID_REPORT_DUPLICATES = "schools_report_duplicates"


async def find_duplicate_schools(
    session_maker: async_sessionmaker[AsyncSession],
) -> list[dict[str, Any]]:
    """
    Find groups of schools sharing a county and normalized name.

    Returns:
        One dict per group with county, normalized name, count and ids
    """
    normalized_name = func.lower(func.trim(School.name))
    stmt = (
        select(
            School.county,
            normalized_name.label("normalized_name"),
            func.count(School.id).label("count"),
            func.array_agg(School.id).label("ids"),
        )
        .group_by(School.county, normalized_name)
        .having(func.count(School.id) > 1)
        .order_by(School.county, normalized_name)
    )

    async with session_maker() as db:
        result = await db.execute(stmt)
        rows = result.all()

    return [
        {
            "county": row.county,
            "normalized_name": row.normalized_name,
            "count": row.count,
            "ids": [str(school_id) for school_id in row.ids],
        }
        for row in rows
    ]


async def report_duplicate_schools(
    session_maker: async_sessionmaker[AsyncSession],
) -> list[dict[str, Any]]:
    """Log every duplicate school group found in the registry."""
    duplicates = await find_duplicate_schools(session_maker)

    for group in duplicates:
        logger.warning(
            f"Duplicate schools in {group['county']}: '{group['normalized_name']}' "
            f"x{group['count']} ({', '.join(group['ids'])})"
        )

    logger.info(f"Duplicate school report complete: {len(duplicates)} group(s) found")
    return duplicates


def register_school_jobs(
    jobs: JobScheduler,
    session_maker: async_sessionmaker[AsyncSession],
) -> None:
    """Register the school registry jobs with the scheduler."""

    async def job() -> None:
        await report_duplicate_schools(session_maker)

    jobs.register(
        job_id=JOB_ID_REPORT_DUPLICATES,
        func=job,
        trigger=IntervalTrigger(hours=1),
    )
