"""
Dashboard Service

Supplies the figures each role's dashboard shows. The same data is what the
assistant reports are grounded on, so report_context() renders a dashboard
into the context string the report prompts expect.

There are no inventory, class or task tables yet; every county, school and
teacher sees the same fixed figures below.
"""

import logging
from datetime import date, timedelta

from mwalimu.modules.dashboard.schemas import (
    CountyDashboard,
    LearningPulse,
    Metric,
    Resource,
    ResourceSummary,
    SchoolClass,
    SchoolDashboard,
    Task,
    TeacherDashboard,
)

logger = logging.getLogger(__name__)

# TODO: replace with queries once resource inventory is recorded per school.
COUNTY_RESOURCES = (
    Resource(id="1", name="Grade 8 Science Textbooks", category="Textbooks", quantity=1500, status="Available"),
    Resource(id="2", name="County Chromebooks", category="Digital Devices", quantity=320, status="Low Stock"),
    Resource(id="3", name="Chemistry Lab Kits", category="Lab Equipment", quantity=90, status="Low Stock"),
    Resource(id="4", name="A4 Paper (Reams)", category="Stationery", quantity=50, status="Out of Stock"),
    Resource(id="5", name="Grade 7 History Textbooks", category="Textbooks", quantity=1800, status="Available"),
)

SCHOOL_RESOURCES = (
    Resource(id="1", name="Grade 8 Science Textbook", category="Textbooks", quantity=230, status="Available"),
    Resource(id="2", name="Student Chromebook", category="Digital Devices", quantity=45, status="Low Stock"),
    Resource(id="3", name="Microscope Kit", category="Lab Equipment", quantity=15, status="Low Stock"),
    Resource(id="4", name="A4 Paper Ream", category="Stationery", quantity=0, status="Out of Stock"),
)

TEACHER_CLASSES = (
    SchoolClass(id=1, name="Grade 8 - Science", students=32, avg_performance=85),
    SchoolClass(id=2, name="Grade 7 - History", students=28, avg_performance=78),
    SchoolClass(id=3, name="Grade 8 - Mathematics", students=30, avg_performance=81),
)

# (id, task, class, days until due)
TEACHER_TASKS = (
    (1, "Grade Chapter 5 Quizzes", "Grade 8 - Science", 1),
    (2, "Prepare lesson on The Roman Empire", "Grade 7 - History", 3),
    (3, "Parent-Teacher Meeting", "All Classes", 7),
)

SCHOOL_HEAD_NAME = "Mrs. Agnes Wanjiru"
COUNTY_OFFICER_NAME = "Mr. David Omondi"


class DashboardService:
    """Role-scoped dashboard data."""

    async def county_data(self, county: str) -> CountyDashboard:
        """Resource stock across the schools of a county."""
        logger.debug(f"Loading county dashboard for {county}")
        return CountyDashboard(county=county, resources=list(COUNTY_RESOURCES))

    async def school_data(self, school_id: str) -> SchoolDashboard:
        """Compliance, engagement, staffing and resource figures for a school."""
        logger.debug(f"Loading school dashboard for {school_id}")
        return SchoolDashboard(
            school_id=school_id,
            compliance_status=Metric(value=85, change=-2),
            learning_pulse=LearningPulse(status="Low Engagement", topic="Geometry"),
            student_teacher_ratio=Metric(value=45, change=3),
            resource_status=ResourceSummary(value=70, summary="Needs Review"),
            resources=list(SCHOOL_RESOURCES),
        )

    async def teacher_data(self, uid: str, today: date | None = None) -> TeacherDashboard:
        """
        Classes and upcoming tasks for a teacher.

        Args:
            uid: Teacher's user id
            today: Date task due dates are counted from (defaults to today)
        """
        logger.debug(f"Loading teacher dashboard for {uid}")
        today = today or date.today()
        tasks = [
            Task(id=task_id, task=task, class_name=class_name, due_date=today + timedelta(days=days))
            for task_id, task, class_name, days in TEACHER_TASKS
        ]
        return TeacherDashboard(
            classes=list(TEACHER_CLASSES),
            tasks=tasks,
            school_head_name=SCHOOL_HEAD_NAME,
            county_officer_name=COUNTY_OFFICER_NAME,
        )


def county_report_context(dashboard: CountyDashboard) -> str:
    return f"County data: {dashboard.model_dump_json()}"


def equity_context(dashboard: CountyDashboard) -> str:
    resources = ", ".join(resource.model_dump_json() for resource in dashboard.resources)
    return f"Current {dashboard.county} county resource data: [{resources}]"


def school_report_context(dashboard: SchoolDashboard) -> str:
    return f"School operational data: {dashboard.model_dump_json()}"
