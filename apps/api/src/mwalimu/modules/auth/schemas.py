"""Authentication schemas."""

from pydantic import BaseModel

from mwalimu.core.auth import UserRole
from mwalimu.modules.auth.views import View


class SessionResponse(BaseModel):
    """The signed-in user's profile and dashboard views."""

    uid: str
    email: str | None
    display_name: str | None
    role: UserRole
    school_id: str | None = None
    county: str | None = None
    home_view: View
    allowed_views: list[View]


class DisplayNameResponse(BaseModel):
    """Suggested display name for a new account."""

    display_name: str | None
