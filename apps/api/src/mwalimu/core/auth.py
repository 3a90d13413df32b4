"""
Authentication and Authorization Module

Sessions are issued by an external identity provider. This module only
validates the provider's JWT access tokens and turns their claims into one
of four session types, one per role:

    CountyOfficer | SchoolHead | Teacher | Student

Role-specific fields live on the type that has them, so a student can never
carry a school id and a school head always has the field, even if empty.

Expected claims:
    sub            - user id
    email          - user email (optional)
    user_metadata  - {role, display_name, school_id, county}
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from mwalimu.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

security = HTTPBearer(
    auto_error=True,
    description="Access token issued by the identity provider",
)


class UserRole(str, Enum):
    """User roles in the system."""

    COUNTY_OFFICER = "COUNTY_OFFICER"
    SCHOOL_HEAD = "SCHOOL_HEAD"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"


@dataclass(frozen=True)
class CountyOfficer:
    """Oversees the schools of one county."""

    role: ClassVar[UserRole] = UserRole.COUNTY_OFFICER

    uid: str
    email: str | None
    display_name: str | None
    county: str | None


@dataclass(frozen=True)
class SchoolHead:
    """Runs one school."""

    role: ClassVar[UserRole] = UserRole.SCHOOL_HEAD

    uid: str
    email: str | None
    display_name: str | None
    school_id: str | None
    county: str | None


@dataclass(frozen=True)
class Teacher:
    """Teaches at one school."""

    role: ClassVar[UserRole] = UserRole.TEACHER

    uid: str
    email: str | None
    display_name: str | None
    school_id: str | None
    county: str | None


@dataclass(frozen=True)
class Student:
    """A learner."""

    role: ClassVar[UserRole] = UserRole.STUDENT

    uid: str
    email: str | None
    display_name: str | None


SessionUser = CountyOfficer | SchoolHead | Teacher | Student


class InvalidClaimsError(ValueError):
    """Raised when token claims cannot be turned into a session user."""


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def session_user_from_claims(claims: dict[str, Any]) -> SessionUser:
    """
    Build the session user for a set of identity provider claims.

    A missing role means a student, matching accounts created before roles
    were recorded. An unrecognised role is rejected.

    Raises:
        InvalidClaimsError: If the subject is missing or the role is unknown
    """
    uid = claims.get("sub")
    if not uid:
        raise InvalidClaimsError("Missing 'sub' claim in token")

    metadata = claims.get("user_metadata") or {}
    email = claims.get("email") or None
    display_name = metadata.get("display_name") or None
    county = metadata.get("county") or None
    school_id = metadata.get("school_id") or None

    raw_role = metadata.get("role") or UserRole.STUDENT.value
    try:
        role = UserRole(raw_role)
    except ValueError as e:
        raise InvalidClaimsError(f"Unknown role '{raw_role}'") from e

    if role is UserRole.COUNTY_OFFICER:
        return CountyOfficer(uid=uid, email=email, display_name=display_name, county=county)
    if role is UserRole.SCHOOL_HEAD:
        return SchoolHead(
            uid=uid, email=email, display_name=display_name, school_id=school_id, county=county
        )
    if role is UserRole.TEACHER:
        return Teacher(
            uid=uid, email=email, display_name=display_name, school_id=school_id, county=county
        )
    return Student(uid=uid, email=email, display_name=display_name)


def decode_access_token(token: str, settings: Settings) -> SessionUser:
    """
    Verify an access token and return its session user.

    Raises:
        HTTPException 401: If the token is expired, invalid or has bad claims
    """
    options = {"verify_aud": settings.jwt_audience is not None}
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret.get_secret_value(),
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options=options,
        )
    except ExpiredSignatureError as e:
        raise _unauthorized("TOKEN_EXPIRED", "Your session has expired. Please sign in again.") from e
    except JWTError as e:
        logger.warning(f"Invalid access token: {e}")
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.") from e

    try:
        return session_user_from_claims(claims)
    except InvalidClaimsError as e:
        logger.warning(f"Invalid token claims: {e}")
        raise _unauthorized(
            "INVALID_TOKEN_CLAIMS", "Token contains invalid or missing claims."
        ) from e


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    settings: Settings = Depends(get_settings),
) -> SessionUser:
    """
    FastAPI dependency returning the authenticated session user.

    Raises:
        HTTPException 401: If the token is missing, invalid or expired
    """
    user = decode_access_token(credentials.credentials, settings)
    logger.debug(f"Authenticated {user.role.value}: {user.uid}")
    return user


def require_roles(*roles: type[SessionUser]) -> Callable[..., Awaitable[SessionUser]]:
    """
    Build a dependency that only admits the given session types.

    Usage:
        @router.post("/reports/county")
        async def report(user: CountyOfficer = Depends(require_roles(CountyOfficer))):
            ...

    Raises:
        HTTPException 403: If the user has another role
    """
    allowed = ", ".join(role.role.value for role in roles)

    async def dependency(user: SessionUser = Depends(get_current_user)) -> SessionUser:
        if not isinstance(user, roles):
            logger.warning(
                f"Access denied: user {user.uid} has role '{user.role.value}', needs one of {allowed}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "error": "ROLE_NOT_ALLOWED",
                    "message": f"This action is only available to: {allowed}.",
                },
            )
        return user

    return dependency


__all__ = [
    "CountyOfficer",
    "SchoolHead",
    "SessionUser",
    "Student",
    "Teacher",
    "UserRole",
    "decode_access_token",
    "get_current_user",
    "require_roles",
    "session_user_from_claims",
]
