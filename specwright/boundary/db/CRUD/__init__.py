"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from specwright.boundary.db.CRUD import session_crud, section_crud

    # Use singleton instances
    session = await session_crud.get_with_children(db, session_id)
    await section_crud.upsert_summary(db, session_id, "CONTEXT", summary)
"""

from specwright.boundary.db.CRUD.base_crud import BaseCRUD, upsert_row
from specwright.boundary.db.CRUD.session_crud import SessionCRUD, session_crud
from specwright.boundary.db.CRUD.section_crud import SectionCRUD, section_crud
from specwright.boundary.db.CRUD.artifact_crud import ArtifactCRUD, artifact_crud
from specwright.boundary.db.CRUD.walkthrough_crud import WalkthroughCRUD, walkthrough_crud

__all__ = [
    "BaseCRUD",
    "upsert_row",
    "SessionCRUD",
    "session_crud",
    "SectionCRUD",
    "section_crud",
    "ArtifactCRUD",
    "artifact_crud",
    "WalkthroughCRUD",
    "walkthrough_crud",
]
