from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from advocate_ai.config import settings
from advocate_ai.dependencies import get_draft_store
from advocate_ai.main import app
from advocate_ai.models.database import Draft
from advocate_ai.services.generation import FORMAL_RESPONSE_PREFIX, SYSTEM_INSTRUCTION
from advocate_ai.services.generative_service import GenerationResult
from advocate_ai.services.stores import DraftStore

CHAT_URL = "/api/v1/ai/chat"
DRAFT_URL = "/api/v1/ai/draft"
EXTRACT_URL = "/api/v1/ai/extract"


def test_chat_without_context_or_history(api_client, fake_service) -> None:
    fake_service.responses = ["**The statute of limitations** is _six_ years.\n\n\n\nConsult counsel."]

    response = api_client.post(CHAT_URL, json={"message": "What is the statute of limitations?"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["response"] == "The statute of limitations is six years.\n\nConsult counsel."
    contents = fake_service.last_contents
    assert len(contents) == 2
    assert contents[0] == SYSTEM_INSTRUCTION
    assert contents[1].text == FORMAL_RESPONSE_PREFIX + "What is the statute of limitations?"


def test_chat_response_never_exposes_system_instruction(api_client, fake_service) -> None:
    response = api_client.post(CHAT_URL, json={"message": "Hello"})
    assert SYSTEM_INSTRUCTION.text not in response.text


def test_chat_forwards_history_in_order(api_client, fake_service) -> None:
    history = [
        {"role": "user", "parts": [{"text": "Who signed the lease?"}]},
        {"role": "model", "text": "Acme LLC signed it."},
    ]
    response = api_client.post(CHAT_URL, json={"message": "When?", "chatHistory": history})

    assert response.status_code == 200
    contents = fake_service.last_contents
    assert [(c.role, c.text) for c in contents[1:3]] == [
        ("user", "Who signed the lease?"),
        ("model", "Acme LLC signed it."),
    ]
    assert contents[-1].text == FORMAL_RESPONSE_PREFIX + "When?"


def test_chat_layers_context_into_prompt(api_client, fake_service, case, client_record) -> None:
    response = api_client.post(CHAT_URL, json={
        "message": "summarize the risks.",
        "contextData": {
            "documentText": "Lease text",
            "documentName": "lease.pdf",
            "caseReference": case.id,
            "clientReference": client_record.id,
        },
    })

    assert response.status_code == 200
    prompt = fake_service.last_contents[-1].text
    assert prompt.startswith(FORMAL_RESPONSE_PREFIX + "Regarding Client \"Jane Smith\"")
    assert prompt.index("Regarding Case \"Smith v. Jones\"") < prompt.index("Document Name: lease.pdf")
    assert prompt.endswith("Based on the above document, summarize the risks.")


def test_chat_accepts_original_client_context_keys(api_client, fake_service) -> None:
    response = api_client.post(CHAT_URL, json={
        "message": "Explain this.",
        "contextData": {"relevantText": "Force majeure clause"},
    })
    assert response.status_code == 200
    assert "Consider the following document content for context: \"Force majeure clause\"" in (
        fake_service.last_contents[-1].text
    )


def test_chat_unknown_case_reference_is_skipped(api_client, fake_service) -> None:
    response = api_client.post(CHAT_URL, json={"message": "Status?", "contextData": {"caseReference": 424242}})
    assert response.status_code == 200
    assert fake_service.last_contents[-1].text == FORMAL_RESPONSE_PREFIX + "Status?"


def test_chat_missing_message_returns_400(api_client, fake_service) -> None:
    response = api_client.post(CHAT_URL, json={"chatHistory": []})
    assert response.status_code == 400
    assert response.json()["success"] is False
    assert "Message is required" in response.json()["message"]
    assert fake_service.calls == []


def test_chat_non_string_message_returns_400(api_client, fake_service) -> None:
    response = api_client.post(CHAT_URL, json={"message": 42})
    assert response.status_code == 400
    assert "message" in response.json()["message"]
    assert fake_service.calls == []


def test_chat_upstream_failure_returns_500(api_client, fake_service) -> None:
    fake_service.responses = [GenerationResult(text="")]
    response = api_client.post(CHAT_URL, json={"message": "Hello"})
    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert "Failed to get response from AI" in body["message"]


def test_generate_draft_returns_201_and_saves(api_client, fake_service, db_session, user, case) -> None:
    fake_service.responses = ["PLEADING\n\nComes now the plaintiff."]
    response = api_client.post(DRAFT_URL, json={
        "title": "Complaint",
        "draftType": "Pleading",
        "prompt": "Draft a complaint for unpaid rent",
        "caseReference": case.id,
    })

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Draft generated and saved successfully."
    draft = body["draft"]
    assert draft["title"] == "Complaint"
    assert draft["content"] == "PLEADING\n\nComes now the plaintiff."
    assert draft["draftType"] == "Pleading"
    assert draft["sourcePrompt"] == "Draft a complaint for unpaid rent"
    assert draft["linkedCase"] == case.id
    assert draft["linkedClient"] is None
    assert draft["status"] == "in_progress"
    assert draft["owner"] == user.id
    assert db_session.query(Draft).count() == 1


def test_generate_draft_without_title_returns_400(api_client, fake_service, db_session) -> None:
    response = api_client.post(DRAFT_URL, json={"prompt": "Draft a complaint"})
    assert response.status_code == 400
    assert "title" in response.json()["message"]
    assert fake_service.calls == []
    assert db_session.query(Draft).count() == 0


def test_extract_returns_extracted_data(api_client, fake_service) -> None:
    fake_service.responses = ['{"amount": 500}']
    response = api_client.post(EXTRACT_URL, json={
        "textToAnalyze": "Invoice total: $500",
        "extractionSchema": {"type": "object", "properties": {"amount": {"type": "number"}}},
    })

    assert response.status_code == 200
    assert response.json() == {
        "extractedData": {"amount": 500},
        "message": "Information extracted successfully.",
    }


def test_extract_missing_schema_returns_400(api_client, fake_service) -> None:
    response = api_client.post(EXTRACT_URL, json={"textToAnalyze": "Invoice total: $500"})
    assert response.status_code == 400
    assert "schema" in response.json()["message"]
    assert fake_service.calls == []


def test_extract_unparsable_payload_returns_500_with_fragment(api_client, fake_service) -> None:
    fake_service.responses = ["not json" + "!" * 400]
    response = api_client.post(EXTRACT_URL, json={
        "textToAnalyze": "Invoice total: $500",
        "extractionSchema": {"type": "object"},
    })

    assert response.status_code == 500
    message = response.json()["message"]
    assert message.startswith("Failed to extract information. AI response fragment: not json")
    fragment = message.split("AI response fragment: ", 1)[1].removesuffix("...")
    assert len(fragment) == 200


def test_chat_blank_message_returns_400(api_client, fake_service) -> None:
    response = api_client.post(CHAT_URL, json={"message": "   "})
    assert response.status_code == 400
    assert "Message is required" in response.json()["message"]
    assert fake_service.calls == []


def test_upstream_failure_hides_cause_when_debug_is_off(api_client, fake_service, monkeypatch) -> None:
    monkeypatch.setattr(settings, "debug", False)
    fake_service.responses = [RuntimeError("secret upstream detail")]

    response = api_client.post(CHAT_URL, json={"message": "Hello"})

    assert response.status_code == 500
    body = response.json()
    assert "error" not in body
    assert "secret upstream detail" not in response.text


def test_upstream_failure_reports_cause_when_debug_is_on(api_client, fake_service, monkeypatch) -> None:
    monkeypatch.setattr(settings, "debug", True)
    fake_service.responses = [RuntimeError("secret upstream detail")]

    response = api_client.post(CHAT_URL, json={"message": "Hello"})

    assert response.status_code == 500
    assert response.json()["error"] == "secret upstream detail"


def test_generate_draft_accepts_original_request_keys(api_client, fake_service, case, client_record) -> None:
    response = api_client.post(DRAFT_URL, json={
        "title": "T",
        "prompt": "Draft a demand letter",
        "caseId": case.id,
        "clientId": str(client_record.id),
        "documentContent": "Clause 9",
    })

    assert response.status_code == 201
    draft = response.json()["draft"]
    assert draft["linkedCase"] == case.id
    assert draft["linkedClient"] == client_record.id
    prompt = fake_service.last_contents[-1].text
    assert "Contextual Case Details: Case Name: Smith v. Jones" in prompt
    assert "Contextual Client Details: Name: Jane Smith" in prompt
    assert 'Relevant Document Snippet for Context: "Clause 9".' in prompt


def test_generate_draft_save_failure_returns_500(api_client, fake_service, db_session) -> None:
    session = MagicMock()
    session.commit.side_effect = OperationalError("INSERT", {}, Exception("disk full"))
    app.dependency_overrides[get_draft_store] = lambda: DraftStore(session)

    response = api_client.post(DRAFT_URL, json={"title": "T", "prompt": "Draft a demand letter"})

    assert response.status_code == 500
    assert response.json()["success"] is False
    assert len(fake_service.calls) == 1
    assert db_session.query(Draft).count() == 0


def test_generate_draft_failure_logs_request_shape(api_client, fake_service, case, caplog) -> None:
    fake_service.responses = [RuntimeError("model unavailable")]

    with caplog.at_level("ERROR", logger="advocate_ai.routers.ai"):
        response = api_client.post(DRAFT_URL, json={
            "title": "Complaint", "prompt": "Draft it", "caseReference": case.id,
        })

    assert response.status_code == 500
    assert "AI draft error" in caplog.text
    assert "'prompt_length': 8" in caplog.text
    assert "'has_case_reference': True" in caplog.text


def test_extract_failure_logs_request_shape(api_client, fake_service, caplog) -> None:
    fake_service.responses = ["not json"]

    with caplog.at_level("ERROR", logger="advocate_ai.routers.ai"):
        response = api_client.post(EXTRACT_URL, json={
            "textToAnalyze": "Invoice total: $500",
            "extractionSchema": {"type": "object", "properties": {}},
        })

    assert response.status_code == 500
    assert "AI extraction error" in caplog.text
    assert "'text_length': 19" in caplog.text
    assert "'schema_keys': ['properties', 'type']" in caplog.text
