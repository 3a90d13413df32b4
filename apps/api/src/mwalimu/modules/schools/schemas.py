"""
School Schemas

Pydantic models for school registry request/response validation.
"""

from pydantic import BaseModel, ConfigDict, Field


class SchoolCreate(BaseModel):
    """Request to resolve a school, creating it if it is not registered yet."""

    name: str = Field(..., max_length=200, description="School name")
    county: str = Field(..., max_length=50, description="County the school is in")


class SchoolResponse(BaseModel):
    """A registered school."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    county: str


class SchoolListResponse(BaseModel):
    """Schools of a county, ordered by name."""

    county: str
    schools: list[SchoolResponse]
    total: int


class County(BaseModel):
    """A county with its two-digit code."""

    name: str
    code: str


class CountyListResponse(BaseModel):
    """All known counties."""

    counties: list[County]
