"""Service orchestrators."""

from .generation_service import GenerationService
from .section_service import SectionService
from .session_service import SessionService
from .walkthrough_service import WalkthroughService

__all__ = [
    "GenerationService",
    "SectionService",
    "SessionService",
    "WalkthroughService",
]
