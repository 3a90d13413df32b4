"""
Unit tests for the dashboard service.
"""

import json
from datetime import date

import pytest

from mwalimu.modules.dashboard.service import (
    DashboardService,
    county_report_context,
    equity_context,
    school_report_context,
)


@pytest.fixture
def dashboard():
    return DashboardService()


class TestCountyData:
    """Tests for county_data."""

    @pytest.mark.asyncio
    async def test_scoped_to_county(self, dashboard):
        data = await dashboard.county_data("Kisumu")

        assert data.county == "Kisumu"
        assert {resource.status for resource in data.resources} == {
            "Available",
            "Low Stock",
            "Out of Stock",
        }

    @pytest.mark.asyncio
    async def test_resource_lists_are_independent(self, dashboard):
        first = await dashboard.county_data("Kisumu")
        first.resources.clear()

        second = await dashboard.county_data("Kisumu")

        assert len(second.resources) == 5


class TestSchoolData:
    """Tests for school_data."""

    @pytest.mark.asyncio
    async def test_operational_figures(self, dashboard):
        data = await dashboard.school_data("school-1")

        assert data.school_id == "school-1"
        assert data.compliance_status.value == 85
        assert data.learning_pulse.topic == "Geometry"
        assert data.student_teacher_ratio.value == 45
        assert data.resource_status.summary == "Needs Review"
        assert len(data.resources) == 4


class TestTeacherData:
    """Tests for teacher_data."""

    @pytest.mark.asyncio
    async def test_due_dates_count_from_today(self, dashboard):
        data = await dashboard.teacher_data("teacher-1", today=date(2026, 3, 2))

        assert [task.due_date for task in data.tasks] == [
            date(2026, 3, 3),
            date(2026, 3, 5),
            date(2026, 3, 9),
        ]
        assert not any(task.completed for task in data.tasks)

    @pytest.mark.asyncio
    async def test_classes_and_administrators(self, dashboard):
        data = await dashboard.teacher_data("teacher-1")

        assert [c.name for c in data.classes][0] == "Grade 8 - Science"
        assert data.school_head_name
        assert data.county_officer_name


class TestReportContext:
    """Tests for rendering dashboards as report context."""

    @pytest.mark.asyncio
    async def test_county_context_embeds_json(self, dashboard):
        context = county_report_context(await dashboard.county_data("Kisumu"))

        payload = json.loads(context.removeprefix("County data: "))
        assert payload["county"] == "Kisumu"

    @pytest.mark.asyncio
    async def test_equity_context_lists_resources(self, dashboard):
        context = equity_context(await dashboard.county_data("Kisumu"))

        payload = json.loads(context.removeprefix("Current Kisumu county resource data: "))
        assert len(payload) == 5

    @pytest.mark.asyncio
    async def test_school_context(self, dashboard):
        context = school_report_context(await dashboard.school_data("school-1"))

        assert context.startswith("School operational data: ")
        assert "Low Engagement" in context
