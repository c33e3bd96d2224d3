"""
Document generation API endpoints.

Routes:
- POST /generate/prefill - Draft section answers from a description
- POST /generate/prd, POST /generate/prd/stream - PRD
- POST /generate/tech-spec, POST /generate/tech-spec/stream - Tech spec
- POST /generate/reflection - Pressure-test both documents
- POST /generate/idea-explorer - Three app ideas from three answers
- POST /refine - Streamed refinement chat about a stored document

Streamed routes answer with text/plain chunks. Errors detected before the
first chunk still use the JSON error envelope.

Dependencies: specwright.application.services
System role: Generation HTTP API
"""

import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from specwright.api.deps import (
    get_generation_service,
    get_section_service,
    rate_limited,
)
from specwright.application.services import GenerationService, SectionService
from specwright.boundary.ratelimit import RateLimitBucket
from specwright.core.prompts import IdeaQuestion
from specwright.models.common import SuccessResponse
from specwright.models.generation import (
    ArtifactResult,
    GenerateRequest,
    Idea,
    IdeaExplorerRequest,
    IdeasResponse,
    RefineRequest,
    ReflectionResponse,
)
from specwright.models.section import PrefillRequest, PrefillResponse
from specwright.models.session import ArtifactResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/generate", tags=["generate"])
refine_router = APIRouter(tags=["generate"])

generate_limit = Depends(rate_limited(RateLimitBucket.GENERATE))


def text_stream(chunks: AsyncIterator[str]) -> StreamingResponse:
    return StreamingResponse(
        chunks,
        media_type="text/plain; charset=utf-8",
        headers={"Cache-Control": "no-cache"},
    )


@router.post(
    "/prefill",
    response_model=SuccessResponse[PrefillResponse],
    dependencies=[generate_limit],
)
async def prefill(
    request: PrefillRequest,
    section_service: SectionService = Depends(get_section_service),
) -> SuccessResponse[PrefillResponse]:
    """
    Draft answers for every section from a product description.

    Raises:
        ValidationError: 400 when the description is shorter than 10 characters
        UpstreamTimeoutError: 504 when the model misses the abort window
        ParseError: 502 when the output is not an answers payload
    """
    answers = await section_service.prefill(
        request.description,
        session_id=request.session_id,
        project_scope=request.project_scope.value if request.project_scope else None,
    )
    return SuccessResponse(data=PrefillResponse(answers=answers))


@router.post("/prd", response_model=SuccessResponse[ArtifactResult], dependencies=[generate_limit])
async def generate_prd(
    request: GenerateRequest,
    generation_service: GenerationService = Depends(get_generation_service),
) -> SuccessResponse[ArtifactResult]:
    artifact = await generation_service.generate_prd(request.session_id)
    return SuccessResponse(data=ArtifactResult(artifact=ArtifactResponse.model_validate(artifact)))


@router.post("/prd/stream", dependencies=[generate_limit])
async def stream_prd(
    request: GenerateRequest,
    generation_service: GenerationService = Depends(get_generation_service),
) -> StreamingResponse:
    return text_stream(await generation_service.stream_prd(request.session_id))


@router.post("/tech-spec", response_model=SuccessResponse[ArtifactResult], dependencies=[generate_limit])
async def generate_tech_spec(
    request: GenerateRequest,
    generation_service: GenerationService = Depends(get_generation_service),
) -> SuccessResponse[ArtifactResult]:
    """
    Raises:
        PrerequisiteMissingError: 400 when no PRD was generated yet
    """
    artifact = await generation_service.generate_tech_spec(request.session_id)
    return SuccessResponse(data=ArtifactResult(artifact=ArtifactResponse.model_validate(artifact)))


@router.post("/tech-spec/stream", dependencies=[generate_limit])
async def stream_tech_spec(
    request: GenerateRequest,
    generation_service: GenerationService = Depends(get_generation_service),
) -> StreamingResponse:
    return text_stream(await generation_service.stream_tech_spec(request.session_id))


@router.post(
    "/reflection",
    response_model=SuccessResponse[ReflectionResponse],
    dependencies=[generate_limit],
)
async def generate_reflection(
    request: GenerateRequest,
    generation_service: GenerationService = Depends(get_generation_service),
) -> SuccessResponse[ReflectionResponse]:
    """
    Raises:
        MissingArtifactsError: 400 unless both PRD and tech spec exist
    """
    content = await generation_service.generate_reflection(request.session_id)
    return SuccessResponse(data=ReflectionResponse(content=content))


@router.post(
    "/idea-explorer",
    response_model=SuccessResponse[IdeasResponse],
    dependencies=[generate_limit],
)
async def explore_ideas(
    request: IdeaExplorerRequest,
    generation_service: GenerationService = Depends(get_generation_service),
) -> SuccessResponse[IdeasResponse]:
    questions = [IdeaQuestion(label=q.label, question=q.question, answer=q.answer) for q in request.questions]
    ideas = await generation_service.explore_ideas(request.question_set_id, questions)
    return SuccessResponse(data=IdeasResponse(ideas=[Idea(**idea.model_dump()) for idea in ideas]))


@refine_router.post("/refine", dependencies=[Depends(rate_limited(RateLimitBucket.REFINE))])
async def refine(
    request: RefineRequest,
    generation_service: GenerationService = Depends(get_generation_service),
) -> StreamingResponse:
    """
    Stream one refinement turn.

    Raises:
        ArtifactNotFoundError: 404 when the document to refine does not exist
    """
    chunks = await generation_service.refine(request.session_id, request.message, request.artifact_type)
    return text_stream(chunks)
