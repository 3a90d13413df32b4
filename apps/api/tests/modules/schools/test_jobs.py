"""
Unit tests for the school registry background jobs.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from mwalimu.core.scheduler import JobScheduler
from mwalimu.modules.schools.jobs import (
    JOB_ID_REPORT_DUPLICATES,
    find_duplicate_schools,
    register_school_jobs,
    report_duplicate_schools,
)


def _row(county, normalized_name, count, ids):
    row = MagicMock()
    row.county = county
    row.normalized_name = normalized_name
    row.count = count
    row.ids = ids
    return row


class TestFindDuplicateSchools:
    """Tests for find_duplicate_schools."""

    @pytest.mark.asyncio
    async def test_returns_duplicate_groups(self, mock_session_maker):
        session_maker, session = mock_session_maker
        result = MagicMock()
        result.all.return_value = [_row("Nakuru", "delta school", 2, ["id-1", "id-2"])]
        session.execute.return_value = result

        duplicates = await find_duplicate_schools(session_maker)

        assert duplicates == [
            {
                "county": "Nakuru",
                "normalized_name": "delta school",
                "count": 2,
                "ids": ["id-1", "id-2"],
            }
        ]

    @pytest.mark.asyncio
    async def test_query_groups_by_normalized_name(self, mock_session_maker):
        session_maker, session = mock_session_maker
        result = MagicMock()
        result.all.return_value = []
        session.execute.return_value = result

        await find_duplicate_schools(session_maker)

        sql = str(session.execute.await_args.args[0]).lower()
        assert "lower(trim(schools.name))" in sql
        assert "having count(schools.id) >" in sql


class TestReportDuplicateSchools:
    """Tests for report_duplicate_schools."""

    @pytest.mark.asyncio
    async def test_logs_each_group(self, caplog):
        groups = [
            {"county": "Nakuru", "normalized_name": "delta school", "count": 2, "ids": ["a", "b"]},
        ]
        with (
            patch(
                "mwalimu.modules.schools.jobs.find_duplicate_schools",
                AsyncMock(return_value=groups),
            ),
            caplog.at_level("WARNING"),
        ):
            result = await report_duplicate_schools(MagicMock())

        assert result == groups
        assert "Duplicate schools in Nakuru" in caplog.text


class TestRegisterSchoolJobs:
    """Tests for job registration."""

    def test_registers_duplicate_report(self):
        jobs = JobScheduler()

        register_school_jobs(jobs, MagicMock())

        assert jobs.job_ids == [JOB_ID_REPORT_DUPLICATES]

    @pytest.mark.asyncio
    async def test_registered_job_runs_report(self):
        jobs = JobScheduler()
        session_maker = MagicMock()
        register_school_jobs(jobs, session_maker)

        with patch(
            "mwalimu.modules.schools.jobs.report_duplicate_schools", AsyncMock(return_value=[])
        ) as mock_report:
            result = await jobs.run_now(JOB_ID_REPORT_DUPLICATES)

        assert result["status"] == "success"
        mock_report.assert_awaited_once_with(session_maker)
