"""
Integration tests for CRUD operations against in-memory SQLite.

Covers idempotent upserts, section independence and ordered decision
replacement.

System role: Verification of the persistence layer
"""

import uuid

import pytest

from specwright.boundary.db.CRUD.artifact_crud import artifact_crud
from specwright.boundary.db.CRUD.section_crud import section_crud
from specwright.boundary.db.CRUD.session_crud import session_crud
from specwright.boundary.db.CRUD.walkthrough_crud import walkthrough_crud
from specwright.core.pipeline import ArtifactType, DecisionStatus, WalkthroughStatus


async def _new_session(db, title: str = "Invoicer"):
    session = await session_crud.create_with_ttl(db, 7, title=title)
    await db.commit()
    return session


def _qa(answer: str) -> list[dict[str, str]]:
    return [{"question_id": "q1", "question": "Who is it for?", "answer": answer}]


class TestSessionCRUD:
    @pytest.mark.asyncio
    async def test_create_with_ttl_sets_expiry_and_default_active_key(self, test_async_db) -> None:
        # Act
        session = await _new_session(test_async_db)

        # Assert
        assert session.expires_at is not None
        assert session.active_key == "CONTEXT"

    @pytest.mark.asyncio
    async def test_get_with_children_unknown_id_returns_none(self, test_async_db) -> None:
        assert await session_crud.get_with_children(test_async_db, uuid.uuid4()) is None


class TestArtifactUpsert:
    """Test suite for artifact upsert idempotence."""

    @pytest.mark.asyncio
    async def test_upsert_twice_keeps_one_row_with_latest_content(self, test_async_db) -> None:
        # Arrange
        session = await _new_session(test_async_db)

        # Act
        await artifact_crud.upsert(test_async_db, session.id, ArtifactType.PRD, "PRD - Invoicer", "first")
        await artifact_crud.upsert(test_async_db, session.id, ArtifactType.PRD, "PRD - Invoicer", "second")
        await test_async_db.commit()

        # Assert
        rows = await artifact_crud.list_for_session(test_async_db, session.id)
        assert len(rows) == 1
        assert rows[0].content_md == "second"
        assert rows[0].id == f"{session.id}-PRD"

    @pytest.mark.asyncio
    async def test_same_content_twice_is_idempotent(self, test_async_db) -> None:
        session = await _new_session(test_async_db)

        for _ in range(2):
            await artifact_crud.upsert(test_async_db, session.id, ArtifactType.TECH_SPEC, "T", "same")
        await test_async_db.commit()

        rows = await artifact_crud.list_for_session(test_async_db, session.id)
        assert [(r.type, r.content_md) for r in rows] == [(ArtifactType.TECH_SPEC, "same")]

    @pytest.mark.asyncio
    async def test_prd_and_tech_spec_coexist(self, test_async_db) -> None:
        session = await _new_session(test_async_db)

        await artifact_crud.upsert(test_async_db, session.id, ArtifactType.PRD, "P", "prd")
        await artifact_crud.upsert(test_async_db, session.id, ArtifactType.TECH_SPEC, "T", "spec")
        await test_async_db.commit()

        prd = await artifact_crud.get_for_session(test_async_db, session.id, ArtifactType.PRD)
        assert prd.content_md == "prd"
        assert len(await artifact_crud.list_for_session(test_async_db, session.id)) == 2


class TestSectionCRUD:
    """Test suite for section answers and summaries."""

    @pytest.mark.asyncio
    async def test_saving_one_section_leaves_others_unchanged(self, test_async_db) -> None:
        # Arrange
        session = await _new_session(test_async_db)
        await section_crud.upsert_answer(test_async_db, session.id, "CONTEXT", _qa("context answer"))
        await section_crud.upsert_answer(test_async_db, session.id, "RISKS", _qa("risk answer"))
        await test_async_db.commit()

        # Act
        await section_crud.upsert_answer(test_async_db, session.id, "RISKS", _qa("new risk answer"), "notes")
        await test_async_db.commit()

        # Assert
        context = await section_crud.get_answer(test_async_db, session.id, "CONTEXT")
        risks = await section_crud.get_answer(test_async_db, session.id, "RISKS")
        assert context.qa == _qa("context answer")
        assert context.notes is None
        assert risks.qa == _qa("new risk answer")
        assert risks.notes == "notes"
        assert len(await section_crud.list_answers(test_async_db, session.id)) == 2

    @pytest.mark.asyncio
    async def test_summary_upsert_replaces(self, test_async_db) -> None:
        session = await _new_session(test_async_db)

        await section_crud.upsert_summary(test_async_db, session.id, "CONTEXT", "v1")
        await section_crud.upsert_summary(test_async_db, session.id, "CONTEXT", "v2")
        await test_async_db.commit()

        assert await section_crud.summaries_by_key(test_async_db, session.id) == {"CONTEXT": "v2"}


class TestWalkthroughCRUD:
    """Test suite for walkthrough persistence."""

    @pytest.mark.asyncio
    async def test_get_or_create_returns_same_walkthrough_and_keeps_status(self, test_async_db) -> None:
        # Arrange
        session = await _new_session(test_async_db)
        first = await walkthrough_crud.get_or_create_for_session(test_async_db, session.id)
        await walkthrough_crud.set_status(test_async_db, first.id, WalkthroughStatus.COMPLETED)
        await test_async_db.commit()

        # Act
        second = await walkthrough_crud.get_or_create_for_session(test_async_db, session.id)
        await test_async_db.commit()

        # Assert
        assert second.id == first.id
        assert second.status == WalkthroughStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_replace_decisions_round_trip_preserves_order(self, test_async_db) -> None:
        # Arrange
        session = await _new_session(test_async_db)
        walkthrough = await walkthrough_crud.get_or_create_for_session(test_async_db, session.id)
        titles = ["Storage", "Compute", "Sync", "Interfaces", "Ops"]
        decisions = [
            {"title": t, "area": "operations", "chosen_option": f"{t} option", "alternatives": ["x", "y"]}
            for t in titles
        ]

        # Act
        await walkthrough_crud.replace_decisions(test_async_db, walkthrough.id, decisions)
        await test_async_db.commit()
        stored = await walkthrough_crud.list_decisions(test_async_db, walkthrough.id)

        # Assert
        assert [d.title for d in stored] == titles
        assert [d.sort_order for d in stored] == list(range(5))
        assert all(d.status == DecisionStatus.TENTATIVE for d in stored)
        assert stored[0].alternatives == ["x", "y"]

    @pytest.mark.asyncio
    async def test_replace_decisions_removes_previous_set(self, test_async_db) -> None:
        session = await _new_session(test_async_db)
        walkthrough = await walkthrough_crud.get_or_create_for_session(test_async_db, session.id)
        base = {"area": "interfaces", "chosen_option": "REST"}

        await walkthrough_crud.replace_decisions(
            test_async_db, walkthrough.id, [{"title": "Old A", **base}, {"title": "Old B", **base}]
        )
        await walkthrough_crud.replace_decisions(test_async_db, walkthrough.id, [{"title": "New", **base}])
        await test_async_db.commit()

        stored = await walkthrough_crud.list_decisions(test_async_db, walkthrough.id)
        assert [d.title for d in stored] == ["New"]

    @pytest.mark.asyncio
    async def test_update_decision_unknown_id_returns_none(self, test_async_db) -> None:
        assert await walkthrough_crud.update_decision(test_async_db, uuid.uuid4(), title="x") is None

    @pytest.mark.asyncio
    async def test_driver_answer_upsert(self, test_async_db) -> None:
        session = await _new_session(test_async_db)
        walkthrough = await walkthrough_crud.get_or_create_for_session(test_async_db, session.id)

        await walkthrough_crud.upsert_driver_answer(test_async_db, walkthrough.id, "unit_of_work", "v1")
        await walkthrough_crud.upsert_driver_answer(test_async_db, walkthrough.id, "unit_of_work", "v2")
        await test_async_db.commit()

        answers = await walkthrough_crud.list_driver_answers(test_async_db, walkthrough.id)
        assert [(a.question_key, a.answer) for a in answers] == [("unit_of_work", "v2")]
