"""
Dashboard Router

Each endpoint serves the signed-in user's own scope: a county officer their
county, a school head their school, a teacher their classes.

Endpoints:
- GET /dashboard/county - County resources (county officer)
- GET /dashboard/school - School operations (school head)
- GET /dashboard/teacher - Classes and tasks (teacher)
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from mwalimu.core.auth import CountyOfficer, SchoolHead, Teacher, require_roles
from mwalimu.modules.dashboard.schemas import CountyDashboard, SchoolDashboard, TeacherDashboard
from mwalimu.modules.dashboard.service import DashboardService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_dashboard(request: Request) -> DashboardService:
    """Get the dashboard service created at startup."""
    return request.app.state.dashboard


def missing_scope(field: str) -> HTTPException:
    """409 for an account whose profile lacks the county or school it is scoped to."""
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={
            "error": "PROFILE_INCOMPLETE",
            "message": f"Your account has no {field} on record.",
        },
    )


@router.get("/county", response_model=CountyDashboard)
async def county_dashboard(
    user: CountyOfficer = Depends(require_roles(CountyOfficer)),
    dashboard: DashboardService = Depends(get_dashboard),
) -> CountyDashboard:
    """Resource stock for the officer's county."""
    if not user.county:
        raise missing_scope("county")
    return await dashboard.county_data(user.county)


@router.get("/school", response_model=SchoolDashboard)
async def school_dashboard(
    user: SchoolHead = Depends(require_roles(SchoolHead)),
    dashboard: DashboardService = Depends(get_dashboard),
) -> SchoolDashboard:
    """Operational figures for the head's school."""
    if not user.school_id:
        raise missing_scope("school")
    return await dashboard.school_data(user.school_id)


@router.get("/teacher", response_model=TeacherDashboard)
async def teacher_dashboard(
    user: Teacher = Depends(require_roles(Teacher)),
    dashboard: DashboardService = Depends(get_dashboard),
) -> TeacherDashboard:
    """The teacher's classes and upcoming tasks."""
    return await dashboard.teacher_data(user.uid)
