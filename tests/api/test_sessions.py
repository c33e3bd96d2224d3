from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from uuid import uuid4

from specwright.core.exceptions import SessionExpiredError, SessionNotFoundError
from specwright.core.pipeline import MainFlowState


def _session(**overrides):
    now = datetime.now(timezone.utc)
    fields = {
        "id": uuid4(),
        "title": "Invoicer",
        "product_description": None,
        "project_scope": None,
        "active_key": "CONTEXT",
        "expires_at": now + timedelta(days=7),
        "created_at": now,
        "updated_at": now,
        "answers": [],
        "summaries": [],
        "artifacts": [],
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


def test_create_session_returns_201_envelope(client, mock_session_service):
    session = _session()
    mock_session_service.create_session.return_value = session

    response = client.post("/api/v1/sessions", json={"title": "Invoicer", "projectScope": "mvp"})

    assert response.status_code == 201
    body = response.json()
    assert body["ok"] is True
    assert body["data"]["session_id"] == str(session.id)
    assert body["data"]["active_key"] == "CONTEXT"
    assert mock_session_service.create_session.await_args.kwargs["title"] == "Invoicer"


def test_get_session_includes_children(client, mock_session_service):
    now = datetime.now(timezone.utc)
    answer = SimpleNamespace(
        key="CONTEXT",
        qa=[{"question_id": "q1", "question": "Who?", "answer": "Freelancers"}],
        notes=None,
        updated_at=now,
    )
    session = _session(answers=[answer])
    mock_session_service.get_session.return_value = session

    response = client.get(f"/api/v1/sessions/{session.id}")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["sections"][0]["qa"][0]["answer"] == "Freelancers"
    assert data["summaries"] == []
    assert data["artifacts"] == []


def test_get_unknown_session_returns_404_envelope(client, mock_session_service):
    session_id = uuid4()
    mock_session_service.get_session.side_effect = SessionNotFoundError(str(session_id))

    response = client.get(f"/api/v1/sessions/{session_id}")

    assert response.status_code == 404
    body = response.json()
    assert body["ok"] is False
    assert body["error"]["code"] == "NOT_FOUND"


def test_get_expired_session_returns_410(client, mock_session_service):
    mock_session_service.get_session.side_effect = SessionExpiredError("x")

    response = client.get(f"/api/v1/sessions/{uuid4()}")

    assert response.status_code == 410
    assert response.json()["error"]["code"] == "SESSION_EXPIRED"


def test_update_session_passes_active_key_value(client, mock_session_service):
    session = _session(active_key="RISKS")
    mock_session_service.update_session.return_value = session

    response = client.patch(f"/api/v1/sessions/{session.id}", json={"activeKey": "RISKS"})

    assert response.status_code == 200
    assert mock_session_service.update_session.await_args.kwargs["active_key"] == "RISKS"
    assert mock_session_service.update_session.await_args.kwargs["title"] is None


def test_progress(client, mock_session_service):
    session_id = uuid4()
    mock_session_service.get_progress.return_value = {
        "session_id": session_id,
        "state": MainFlowState.PRD_GENERATED,
        "completed_sections": ["CONTEXT"],
        "total_sections": 8,
        "artifacts": ["PRD"],
        "unlocked_stages": ["sections", "prd", "tech_spec"],
        "has_walkthrough": False,
    }

    response = client.get(f"/api/v1/sessions/{session_id}/progress")

    assert response.status_code == 200
    assert response.json()["data"]["state"] == "PRD_GENERATED"


def test_save_section_accepts_camel_case(client, mock_section_service):
    session_id = uuid4()

    response = client.patch(
        f"/api/v1/sessions/{session_id}/sections",
        json={"key": "CONTEXT", "qa": [{"questionId": "q1", "question": "Who?", "answer": "Freelancers"}]},
    )

    assert response.status_code == 200
    assert response.json() == {"ok": True, "data": {"saved": True}}
    args = mock_section_service.save_section.await_args.args
    assert args[0] == session_id
    assert args[2] == [{"question_id": "q1", "question": "Who?", "answer": "Freelancers"}]


def test_save_section_unknown_key_returns_validation_error(client, mock_section_service):
    response = client.patch(f"/api/v1/sessions/{uuid4()}/sections", json={"key": "BOGUS", "qa": []})

    assert response.status_code == 400
    body = response.json()
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert body["error"]["details"]["errors"][0]["field"] == "key"
    mock_section_service.save_section.assert_not_called()


def test_malformed_session_id_returns_validation_error(client, mock_session_service):
    response = client.get("/api/v1/sessions/not-a-uuid")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
