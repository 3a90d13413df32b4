"""Authentication router."""

import logging

from fastapi import APIRouter, Depends, Query

from mwalimu.core.auth import SessionUser, UserRole, get_current_user
from mwalimu.modules.auth.schemas import DisplayNameResponse, SessionResponse
from mwalimu.modules.auth.views import allowed_views, home_view
from mwalimu.modules.schools.counties import generate_display_name

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=SessionResponse)
async def get_session(user: SessionUser = Depends(get_current_user)) -> SessionResponse:
    """
    Return the signed-in user's profile.

    Sign-in itself happens against the identity provider; this endpoint only
    reads the validated token.
    """
    return SessionResponse(
        uid=user.uid,
        email=user.email,
        display_name=user.display_name,
        role=user.role,
        school_id=getattr(user, "school_id", None),
        county=getattr(user, "county", None),
        home_view=home_view(user),
        allowed_views=allowed_views(user),
    )


@router.get("/display-name", response_model=DisplayNameResponse)
async def suggest_display_name(
    role: UserRole = Query(..., description="Role being signed up for"),
    county: str | None = Query(None, description="County of the account"),
) -> DisplayNameResponse:
    """
    Suggest a display name for a new staff account.

    Used by the sign-up form before the account exists, so it is public.
    Students get no suggestion.
    """
    return DisplayNameResponse(display_name=generate_display_name(role.value, county))
