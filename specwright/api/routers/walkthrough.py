"""
Tech walkthrough API endpoints.

Routes:
- POST /tech-walkthrough - Open (create or fetch) a session's walkthrough
- GET /tech-walkthrough?session_id= - Get walkthrough with children
- POST /tech-walkthrough/drivers - Save driver answers
- POST /tech-walkthrough/agentic-profile - Save agentic profile
- PATCH /tech-walkthrough/decisions - Edit one decision
- POST /tech-walkthrough/decisions/propose - Replace decisions with proposals
- POST /tech-walkthrough/generate-spec - Compose and store the tech spec
- POST /tech-walkthrough/generate-diagram - Mermaid architecture diagram
- POST /tech-walkthrough/prefill - Drivers and profile drafted from a PRD
- POST /tech-walkthrough/suggest - Alternative answers for one driver

Dependencies: specwright.application.services.walkthrough_service
System role: Architecture walkthrough HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from specwright.api.deps import get_walkthrough_service
from specwright.application.services import WalkthroughService
from specwright.models.common import SavedResponse, SuccessResponse
from specwright.models.walkthrough import (
    AgenticProfile,
    Decision,
    DecisionIdResponse,
    DecisionsResponse,
    DiagramResponse,
    DriverSuggestRequest,
    DriverSuggestResponse,
    GenerateDiagramRequest,
    GenerateSpecRequest,
    OpenWalkthroughRequest,
    ProposeDecisionsRequest,
    SaveAgenticProfileRequest,
    SaveDriversRequest,
    SavedCountResponse,
    SpecResponse,
    UpdateDecisionRequest,
    WalkthroughPrefillRequest,
    WalkthroughPrefillResponse,
    WalkthroughResponse,
)

router = APIRouter(prefix="/tech-walkthrough", tags=["tech-walkthrough"])


@router.post("", response_model=SuccessResponse[WalkthroughResponse])
async def open_walkthrough(
    request: OpenWalkthroughRequest,
    walkthrough_service: WalkthroughService = Depends(get_walkthrough_service),
) -> SuccessResponse[WalkthroughResponse]:
    """Create the walkthrough on first open; later opens return it unchanged."""
    walkthrough = await walkthrough_service.open_walkthrough(request.session_id)
    return SuccessResponse(data=WalkthroughResponse(**walkthrough))


@router.get("", response_model=SuccessResponse[WalkthroughResponse])
async def get_walkthrough(
    session_id: UUID,
    walkthrough_service: WalkthroughService = Depends(get_walkthrough_service),
) -> SuccessResponse[WalkthroughResponse]:
    walkthrough = await walkthrough_service.get_walkthrough(session_id)
    return SuccessResponse(data=WalkthroughResponse(**walkthrough))


@router.post("/drivers", response_model=SuccessResponse[SavedCountResponse])
async def save_drivers(
    request: SaveDriversRequest,
    walkthrough_service: WalkthroughService = Depends(get_walkthrough_service),
) -> SuccessResponse[SavedCountResponse]:
    saved = await walkthrough_service.save_drivers(
        request.walkthrough_id,
        [driver.model_dump() for driver in request.drivers],
    )
    return SuccessResponse(data=SavedCountResponse(saved=saved))


@router.post("/agentic-profile", response_model=SuccessResponse[SavedResponse])
async def save_agentic_profile(
    request: SaveAgenticProfileRequest,
    walkthrough_service: WalkthroughService = Depends(get_walkthrough_service),
) -> SuccessResponse[SavedResponse]:
    await walkthrough_service.save_agentic_profile(
        request.walkthrough_id,
        **request.model_dump(exclude={"walkthrough_id"}),
    )
    return SuccessResponse(data=SavedResponse())


@router.patch("/decisions", response_model=SuccessResponse[DecisionIdResponse])
async def update_decision(
    request: UpdateDecisionRequest,
    walkthrough_service: WalkthroughService = Depends(get_walkthrough_service),
) -> SuccessResponse[DecisionIdResponse]:
    """
    Raises:
        DecisionNotFoundError: 404 NOT_FOUND for an unknown decision id
    """
    decision_id = await walkthrough_service.update_decision(
        request.decision_id, **request.updates.model_dump()
    )
    return SuccessResponse(data=DecisionIdResponse(id=decision_id))


@router.post("/decisions/propose", response_model=SuccessResponse[DecisionsResponse])
async def propose_decisions(
    request: ProposeDecisionsRequest,
    walkthrough_service: WalkthroughService = Depends(get_walkthrough_service),
) -> SuccessResponse[DecisionsResponse]:
    """
    Replace the walkthrough's decisions with freshly proposed ones.

    Decision ids change on every proposal.
    """
    decisions = await walkthrough_service.propose_decisions(
        request.walkthrough_id,
        request.prd_content,
        request.drivers,
        request.agentic_profile.model_dump() if request.agentic_profile else None,
    )
    return SuccessResponse(data=DecisionsResponse(decisions=[Decision(**d) for d in decisions]))


@router.post("/generate-spec", response_model=SuccessResponse[SpecResponse])
async def generate_spec(
    request: GenerateSpecRequest,
    walkthrough_service: WalkthroughService = Depends(get_walkthrough_service),
) -> SuccessResponse[SpecResponse]:
    decisions = [d.model_dump() for d in request.decisions] if request.decisions is not None else None
    spec = await walkthrough_service.generate_spec(
        request.walkthrough_id,
        request.session_id,
        request.prd_content,
        request.drivers,
        decisions,
    )
    return SuccessResponse(data=SpecResponse(spec=spec))


@router.post("/generate-diagram", response_model=SuccessResponse[DiagramResponse])
async def generate_diagram(
    request: GenerateDiagramRequest,
    walkthrough_service: WalkthroughService = Depends(get_walkthrough_service),
) -> SuccessResponse[DiagramResponse]:
    diagram = await walkthrough_service.generate_diagram(
        request.prd_content,
        request.drivers,
        [d.model_dump() for d in request.decisions],
    )
    return SuccessResponse(data=DiagramResponse(diagram=diagram))


@router.post("/prefill", response_model=SuccessResponse[WalkthroughPrefillResponse])
async def prefill(
    request: WalkthroughPrefillRequest,
    walkthrough_service: WalkthroughService = Depends(get_walkthrough_service),
) -> SuccessResponse[WalkthroughPrefillResponse]:
    result = await walkthrough_service.prefill(request.prd_content)
    profile = result["agentic_profile"]
    return SuccessResponse(
        data=WalkthroughPrefillResponse(
            answers=result["answers"],
            agentic_profile=AgenticProfile(**profile) if profile else None,
        )
    )


@router.post("/suggest", response_model=SuccessResponse[DriverSuggestResponse])
async def suggest_driver(
    request: DriverSuggestRequest,
    walkthrough_service: WalkthroughService = Depends(get_walkthrough_service),
) -> SuccessResponse[DriverSuggestResponse]:
    suggestions = await walkthrough_service.suggest_driver(
        request.prd_content, request.question_key, request.current_answer
    )
    return SuccessResponse(data=DriverSuggestResponse(suggestions=suggestions))
