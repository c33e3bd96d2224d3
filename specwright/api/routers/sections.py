"""
Section assistance API endpoints.

Routes:
- POST /suggest - Suggestions for the section text being edited
- POST /summarize - Summarize and store one section

Dependencies: specwright.application.services.section_service
System role: Per-section model assistance HTTP API
"""

from fastapi import APIRouter, Depends

from specwright.api.deps import get_section_service, rate_limited
from specwright.application.services import SectionService
from specwright.boundary.ratelimit import RateLimitBucket
from specwright.models.common import SuccessResponse
from specwright.models.section import (
    SuggestRequest,
    SuggestResponse,
    SummarizeRequest,
    SummaryResponse,
)

router = APIRouter(tags=["sections"])


@router.post(
    "/suggest",
    response_model=SuccessResponse[SuggestResponse],
    dependencies=[Depends(rate_limited(RateLimitBucket.SUGGEST))],
)
async def suggest(
    request: SuggestRequest,
    section_service: SectionService = Depends(get_section_service),
) -> SuccessResponse[SuggestResponse]:
    suggestions = await section_service.suggest(request.session_id, request.key, request.current_text)
    return SuccessResponse(data=SuggestResponse(suggestions=suggestions))


@router.post(
    "/summarize",
    response_model=SuccessResponse[SummaryResponse],
    dependencies=[Depends(rate_limited(RateLimitBucket.SUMMARIZE))],
)
async def summarize(
    request: SummarizeRequest,
    section_service: SectionService = Depends(get_section_service),
) -> SuccessResponse[SummaryResponse]:
    """
    Summarize a section's saved answers; the stored summary completes the section.

    Raises:
        SectionNotFoundError: 404 NOT_FOUND when nothing was saved for the section
    """
    summary = await section_service.summarize(request.session_id, request.key)
    return SuccessResponse(data=SummaryResponse(summary=summary))
