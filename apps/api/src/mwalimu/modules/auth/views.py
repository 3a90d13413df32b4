"""
Dashboard Views

Which dashboard views each role lands on and may open.
"""

from enum import Enum

from mwalimu.core.auth import CountyOfficer, SchoolHead, SessionUser, Student, Teacher


class View(str, Enum):
    """Dashboard views."""

    DASHBOARD = "DASHBOARD"
    COUNTY_OFFICER = "COUNTY_OFFICER"
    SCHOOL_HEAD = "SCHOOL_HEAD"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"


HOME_VIEWS: dict[type, View] = {
    CountyOfficer: View.COUNTY_OFFICER,
    SchoolHead: View.SCHOOL_HEAD,
    Teacher: View.TEACHER,
    Student: View.STUDENT,
}

# Officers can look down into school views, school heads into teacher views.
# Students only ever see their own view.
ALLOWED_VIEWS: dict[type, list[View]] = {
    CountyOfficer: [View.DASHBOARD, View.COUNTY_OFFICER, View.SCHOOL_HEAD],
    SchoolHead: [View.DASHBOARD, View.SCHOOL_HEAD, View.TEACHER],
    Teacher: [View.DASHBOARD, View.TEACHER],
    Student: [View.STUDENT],
}


def home_view(user: SessionUser) -> View:
    """The view a user lands on after signing in."""
    return HOME_VIEWS[type(user)]


def allowed_views(user: SessionUser) -> list[View]:
    """Views a user may open."""
    return list(ALLOWED_VIEWS[type(user)])
