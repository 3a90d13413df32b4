"""
Assistant Router

Role-scoped AI endpoints. Each endpoint is only open to the roles whose
dashboard shows the matching assistant. Reports sent without a context are
grounded on the caller's own dashboard data.

Endpoints:
- POST /assistant/reports/county - County officer report
- POST /assistant/reports/school - School head report
- POST /assistant/reports/equity - County equity analysis
- POST /assistant/tutor - Student tutor chat
- POST /assistant/teaching-assistant - Teacher assistant chat
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from mwalimu.core.auth import CountyOfficer, SchoolHead, SessionUser, Student, Teacher, require_roles
from mwalimu.modules.assistant.schemas import (
    ChatRequest,
    ChatResponse,
    EquityRequest,
    EquityResponse,
    ReportRequest,
    ReportResponse,
    TutorChatRequest,
)
from mwalimu.modules.assistant.service import AssistantService, AssistantServiceError
from mwalimu.modules.dashboard.router import get_dashboard
from mwalimu.modules.dashboard.service import (
    DashboardService,
    county_report_context,
    equity_context,
    school_report_context,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_assistant(request: Request) -> AssistantService:
    """Get the assistant service created at startup."""
    return request.app.state.assistant


def _to_http_error(error: AssistantServiceError) -> HTTPException:
    return HTTPException(
        status_code=error.status_code,
        detail={"error": error.error_code, "message": error.message},
    )


@router.post("/reports/county", response_model=ReportResponse)
async def county_report(
    data: ReportRequest,
    user: CountyOfficer = Depends(require_roles(CountyOfficer)),
    assistant: AssistantService = Depends(get_assistant),
    dashboard: DashboardService = Depends(get_dashboard),
) -> ReportResponse:
    """Generate a strategic report for a county officer."""
    context = data.context
    if not context.strip() and user.county:
        context = county_report_context(await dashboard.county_data(user.county))

    try:
        report = await assistant.county_officer_report(data.query, context)
    except AssistantServiceError as e:
        raise _to_http_error(e) from e

    logger.info(f"County report generated for {user.uid}")
    return ReportResponse(report=report)


@router.post("/reports/school", response_model=ReportResponse)
async def school_report(
    data: ReportRequest,
    user: SchoolHead = Depends(require_roles(SchoolHead)),
    assistant: AssistantService = Depends(get_assistant),
    dashboard: DashboardService = Depends(get_dashboard),
) -> ReportResponse:
    """Generate an operational report for a school head."""
    context = data.context
    if not context.strip() and user.school_id:
        context = school_report_context(await dashboard.school_data(user.school_id))

    try:
        report = await assistant.school_head_report(data.query, context)
    except AssistantServiceError as e:
        raise _to_http_error(e) from e

    logger.info(f"School report generated for {user.uid}")
    return ReportResponse(report=report)


@router.post("/reports/equity", response_model=EquityResponse)
async def equity_report(
    data: EquityRequest,
    user: CountyOfficer = Depends(require_roles(CountyOfficer)),
    assistant: AssistantService = Depends(get_assistant),
    dashboard: DashboardService = Depends(get_dashboard),
) -> EquityResponse:
    """Generate a per-ward equity analysis for a county officer."""
    context = data.context
    if not context.strip() and user.county:
        context = equity_context(await dashboard.county_data(user.county))

    try:
        wards = await assistant.equity_analysis(context)
    except AssistantServiceError as e:
        raise _to_http_error(e) from e

    return EquityResponse(wards=wards)


@router.post("/tutor", response_model=ChatResponse)
async def tutor_chat(
    data: TutorChatRequest,
    user: SessionUser = Depends(require_roles(Student)),
    assistant: AssistantService = Depends(get_assistant),
) -> ChatResponse:
    """Send a message to the student tutor."""
    try:
        reply = await assistant.tutor_reply(data.history, data.message, data.resource_context)
    except AssistantServiceError as e:
        logger.warning(f"Tutor chat failed for {user.uid}: {e.error_code}")
        raise _to_http_error(e) from e

    return ChatResponse(reply=reply)


@router.post("/teaching-assistant", response_model=ChatResponse)
async def teaching_assistant_chat(
    data: ChatRequest,
    user: SessionUser = Depends(require_roles(Teacher, SchoolHead)),
    assistant: AssistantService = Depends(get_assistant),
) -> ChatResponse:
    """Send a message to the teaching assistant."""
    try:
        reply = await assistant.teacher_assistant_reply(data.history, data.message)
    except AssistantServiceError as e:
        logger.warning(f"Teaching assistant chat failed for {user.uid}: {e.error_code}")
        raise _to_http_error(e) from e

    return ChatResponse(reply=reply)
