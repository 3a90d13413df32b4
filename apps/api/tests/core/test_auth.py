"""
Unit tests for identity token handling.
"""

import time

import pytest
from fastapi import HTTPException
from jose import jwt

from mwalimu.core.auth import (
    CountyOfficer,
    SchoolHead,
    Student,
    Teacher,
    UserRole,
    decode_access_token,
    require_roles,
    session_user_from_claims,
)
from mwalimu.core.config import Settings

SECRET = "unit-test-secret"


@pytest.fixture
def settings():
    return Settings(jwt_secret=SECRET, jwt_algorithm="HS256", jwt_audience="authenticated")


def _token(claims: dict, secret: str = SECRET) -> str:
    return jwt.encode(claims, secret, algorithm="HS256")


class TestSessionUserFromClaims:
    """Tests for session_user_from_claims."""

    def test_county_officer(self):
        user = session_user_from_claims(
            {
                "sub": "u1",
                "email": "officer@example.com",
                "user_metadata": {"role": "COUNTY_OFFICER", "county": "Nairobi"},
            }
        )

        assert user == CountyOfficer(
            uid="u1", email="officer@example.com", display_name=None, county="Nairobi"
        )
        assert user.role is UserRole.COUNTY_OFFICER

    def test_school_head_carries_school(self):
        user = session_user_from_claims(
            {
                "sub": "u2",
                "user_metadata": {
                    "role": "SCHOOL_HEAD",
                    "school_id": "school-1",
                    "county": "Kiambu",
                    "display_name": "SCHOOLHEAD130042",
                },
            }
        )

        assert isinstance(user, SchoolHead)
        assert user.school_id == "school-1"
        assert user.display_name == "SCHOOLHEAD130042"

    def test_teacher(self):
        user = session_user_from_claims(
            {"sub": "u3", "user_metadata": {"role": "TEACHER", "school_id": "school-1"}}
        )

        assert isinstance(user, Teacher)
        assert user.county is None

    def test_missing_role_defaults_to_student(self):
        user = session_user_from_claims({"sub": "u4", "user_metadata": {"school_id": "ignored"}})

        assert isinstance(user, Student)
        assert not hasattr(user, "school_id")

    def test_missing_metadata_defaults_to_student(self):
        assert isinstance(session_user_from_claims({"sub": "u5"}), Student)

    def test_unknown_role_is_rejected(self):
        with pytest.raises(ValueError):
            session_user_from_claims({"sub": "u6", "user_metadata": {"role": "ADMIN"}})

    def test_missing_subject_is_rejected(self):
        with pytest.raises(ValueError):
            session_user_from_claims({"user_metadata": {"role": "TEACHER"}})


class TestDecodeAccessToken:
    """Tests for decode_access_token."""

    def test_valid_token(self, settings):
        token = _token(
            {"sub": "u1", "aud": "authenticated", "user_metadata": {"role": "TEACHER"}}
        )

        user = decode_access_token(token, settings)

        assert isinstance(user, Teacher)
        assert user.uid == "u1"

    def test_wrong_secret_is_401(self, settings):
        token = _token({"sub": "u1", "aud": "authenticated"}, secret="other-secret")

        with pytest.raises(HTTPException) as exc_info:
            decode_access_token(token, settings)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail["error"] == "INVALID_TOKEN"

    def test_expired_token_is_401(self, settings):
        token = _token({"sub": "u1", "aud": "authenticated", "exp": int(time.time()) - 60})

        with pytest.raises(HTTPException) as exc_info:
            decode_access_token(token, settings)

        assert exc_info.value.detail["error"] == "TOKEN_EXPIRED"

    def test_wrong_audience_is_401(self, settings):
        token = _token({"sub": "u1", "aud": "someone-else"})

        with pytest.raises(HTTPException):
            decode_access_token(token, settings)

    def test_audience_check_can_be_disabled(self):
        settings = Settings(jwt_secret=SECRET, jwt_audience=None)
        token = _token({"sub": "u1"})

        assert isinstance(decode_access_token(token, settings), Student)

    def test_bad_claims_are_401(self, settings):
        token = _token(
            {"sub": "u1", "aud": "authenticated", "user_metadata": {"role": "PRINCIPAL"}}
        )

        with pytest.raises(HTTPException) as exc_info:
            decode_access_token(token, settings)

        assert exc_info.value.detail["error"] == "INVALID_TOKEN_CLAIMS"


class TestRequireRoles:
    """Tests for require_roles."""

    @pytest.mark.asyncio
    async def test_allowed_role_passes(self):
        user = CountyOfficer(uid="u1", email=None, display_name=None, county="Nairobi")
        dependency = require_roles(CountyOfficer)

        assert await dependency(user=user) is user

    @pytest.mark.asyncio
    async def test_any_of_several_roles(self):
        user = SchoolHead(uid="u2", email=None, display_name=None, school_id=None, county=None)
        dependency = require_roles(Teacher, SchoolHead)

        assert await dependency(user=user) is user

    @pytest.mark.asyncio
    async def test_other_role_is_403(self):
        user = Student(uid="u3", email=None, display_name=None)
        dependency = require_roles(CountyOfficer)

        with pytest.raises(HTTPException) as exc_info:
            await dependency(user=user)

        assert exc_info.value.status_code == 403
        assert "COUNTY_OFFICER" in exc_info.value.detail["message"]
