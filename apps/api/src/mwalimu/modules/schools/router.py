"""
Schools Router

API endpoints for the school registry. These endpoints are public (no
authentication required) because the sign-up form uses them before any
account exists.

Endpoints:
- GET /schools?county=... - List the schools of a county
- POST /schools - Resolve a school by name, creating it if needed
- GET /schools/counties - List supported counties
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from mwalimu.core.config import settings
from mwalimu.core.rate_limit import rate_limit
from mwalimu.modules.schools.counties import COUNTY_CODES, KENYAN_COUNTIES
from mwalimu.modules.schools.schemas import (
    County,
    CountyListResponse,
    SchoolCreate,
    SchoolListResponse,
    SchoolResponse,
)
from mwalimu.modules.schools.service import (
    SchoolRegistry,
    SchoolRegistryError,
    WritePolicyDeniedError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_school_registry(request: Request) -> SchoolRegistry:
    """Get the school registry created at startup."""
    return request.app.state.school_registry


def _to_http_error(error: SchoolRegistryError) -> HTTPException:
    detail = {
        "error": error.error_code,
        "message": error.message,
    }
    if isinstance(error, WritePolicyDeniedError):
        detail["hint"] = error.hint
    return HTTPException(status_code=error.status_code, detail=detail)


@router.get(
    "/counties",
    response_model=CountyListResponse,
    summary="List Supported Counties",
)
async def list_counties() -> CountyListResponse:
    """List the counties a school can be registered in, alphabetically."""
    return CountyListResponse(
        counties=[County(name=name, code=COUNTY_CODES[name]) for name in sorted(KENYAN_COUNTIES)]
    )


@router.get(
    "",
    response_model=SchoolListResponse,
    summary="List Schools in a County",
    description="""
List the registered schools of a county, ordered by name.

Ordering follows the database collation and is case-sensitive. An unknown
county returns an empty list.
""",
)
async def list_schools(
    county: str = Query(..., min_length=1, description="County name"),
    search: str | None = Query(None, max_length=200, description="Case-insensitive name filter"),
    registry: SchoolRegistry = Depends(get_school_registry),
) -> SchoolListResponse:
    """
    List schools in a county.

    Raises:
        HTTPException 422: If county is blank
        HTTPException 503: If the registry store is unavailable
    """
    try:
        schools = await registry.list_schools(county, search=search)
    except SchoolRegistryError as e:
        logger.warning(f"Listing schools for {county} failed: {e.message}")
        raise _to_http_error(e) from e

    return SchoolListResponse(
        county=county,
        schools=[SchoolResponse.model_validate(school) for school in schools],
        total=len(schools),
    )


@router.post(
    "",
    response_model=SchoolResponse,
    summary="Resolve or Register a School",
    description="""
Find a school by name in a county, registering it if it does not exist.

The name is trimmed and matched case-insensitively, so "  alpha primary "
resolves to an existing "Alpha Primary". Concurrent first-time requests for
the same school may each be answered with a valid record.

**Errors:**
- 422 `INVALID_INPUT` - blank name or county
- 403 `WRITE_POLICY_DENIED` - the database access policy forbids the insert (deployment issue)
- 503 `STORE_UNAVAILABLE` - temporary failure, try again
""",
    dependencies=[
        Depends(
            rate_limit(
                limit=settings.school_create_rate_limit,
                window_seconds=settings.school_create_rate_window_seconds,
            )
        )
    ],
)
async def resolve_school(
    data: SchoolCreate,
    registry: SchoolRegistry = Depends(get_school_registry),
) -> SchoolResponse:
    """
    Resolve a school, creating it on first request.

    Raises:
        HTTPException 422: If name or county is blank
        HTTPException 403: If the store's access policy denies the insert
        HTTPException 503: If the registry store is unavailable
    """
    try:
        school = await registry.resolve_or_create_school(data.name, data.county)
    except SchoolRegistryError as e:
        logger.warning(f"Resolving school '{data.name}' in {data.county} failed: {e.error_code}")
        raise _to_http_error(e) from e

    return SchoolResponse.model_validate(school)
