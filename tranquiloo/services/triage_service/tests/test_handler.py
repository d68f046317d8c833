"""Tests for the Triage Service HTTP handler."""
import random
from unittest.mock import patch

import pytest

from tranquiloo.services.triage_service import handler
from tranquiloo.services.triage_service.config import ProviderSettings
from tranquiloo.services.triage_service.local_generator import LocalGenerator
from tranquiloo.services.triage_service.pipeline import build_pipeline


@pytest.fixture
def client(monkeypatch):
    """Flask test client over a pipeline with no providers configured."""
    monkeypatch.setattr(
        handler,
        "pipeline",
        build_pipeline(ProviderSettings(), local=LocalGenerator(rng=random.Random(0))),
    )
    handler.app.config["TESTING"] = True
    with handler.app.test_client() as client:
        yield client


class TestProbes:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.get_json()
        assert body["service"] == "triage-service"
        assert body["providers"] == {"primary": False, "secondary": False, "crisis": False}

    def test_ready(self, client):
        response = client.get("/ready")

        assert response.status_code == 200
        assert response.get_json()["status"] == "ready"


class TestTriageValidation:
    """Malformed requests are rejected before the pipeline runs."""

    @pytest.mark.parametrize("body", [
        {},
        {"message": ""},
        {"message": "   "},
        {"message": 42},
    ])
    def test_missing_message(self, client, body):
        response = client.post("/triage", json=body)

        assert response.status_code == 400
        assert "message" in response.get_json()["error"]

    def test_non_json_body(self, client):
        response = client.post("/triage", data="hello", content_type="text/plain")

        assert response.status_code == 400

    def test_history_must_be_list_of_objects(self, client):
        response = client.post("/triage", json={"message": "hi there", "history": ["hi"]})

        assert response.status_code == 400

    def test_screening_responses_must_be_list(self, client):
        response = client.post(
            "/triage", json={"message": "yes", "screeningResponses": "yes"}
        )

        assert response.status_code == 400


class TestTriage:

    def test_crisis_message_starts_screening(self, client):
        response = client.post("/triage", json={"message": "I'm going to kill myself tonight"})

        assert response.status_code == 200
        body = response.get_json()
        assert body["screeningRequired"] is True
        assert body["crisisAssessment"]["riskLevel"] == "imminent"
        assert body["nextQuestion"].startswith("Have you had thoughts of killing yourself?")
        assert body["analysis"] is None
        assert "988" in body["responseText"]

    def test_neutral_message_gets_local_analysis(self, client):
        response = client.post("/triage", json={
            "message": "Work was exhausting today",
            "history": [{"role": "user", "content": "Hello"}],
        })

        assert response.status_code == 200
        body = response.get_json()
        assert body["screeningRequired"] is False
        assert body["analysis"]["source"] == "local"
        assert body["responseText"] == body["analysis"]["personalizedResponse"]

    def test_completed_screening_outcome(self, client):
        response = client.post("/triage", json={
            "message": "yes",
            "screeningResponses": ["no", "no", "yes", "no", "no", "no"],
        })

        body = response.get_json()
        assert body["screeningOutcome"]["finalRiskLevel"] == "high"
        assert body["screeningOutcome"]["shouldAlert"] is True

    def test_unexpected_error_returns_crisis_lines(self, client):
        with patch.object(handler.pipeline, "process", side_effect=RuntimeError("boom")):
            response = client.post("/triage", json={"message": "hello there"})

        assert response.status_code == 500
        body = response.get_json()
        assert body["error"] == "Internal error"
        assert "988" in body["responseText"]
        assert "741741" in body["responseText"]


class TestCrisisAssess:

    def test_high_risk(self, client):
        response = client.post("/crisis/assess", json={"message": "I want to die"})

        body = response.get_json()
        assert body["riskLevel"] == "high"
        assert body["requiresScreening"] is True
        assert body["source"] == "keyword_fallback"
        assert body["nextQuestion"] is not None

    def test_no_risk(self, client):
        body = client.post("/crisis/assess", json={"message": "Lovely walk today"}).get_json()

        assert body["riskLevel"] == "none"
        assert body["nextQuestion"] is None

    def test_missing_message(self, client):
        assert client.post("/crisis/assess", json={}).status_code == 400


class TestScreeningNext:

    def test_in_progress(self, client):
        body = client.post(
            "/screening/next", json={"screeningResponses": [True, "no"]}
        ).get_json()

        assert body["complete"] is False
        assert body["nextQuestion"].startswith("Have you thought about how you might end your life?")
        assert body["outcome"] is None

    def test_complete(self, client):
        body = client.post(
            "/screening/next", json={"screeningResponses": ["no"] * 6}
        ).get_json()

        assert body["complete"] is True
        assert body["outcome"]["finalRiskLevel"] == "low"
        assert body["outcome"]["shouldAlert"] is False

    def test_invalid_responses(self, client):
        response = client.post("/screening/next", json={"screeningResponses": {"q1": "yes"}})

        assert response.status_code == 400


class TestLanguageDetect:

    def test_explicit_intent(self, client):
        body = client.post(
            "/language/detect", json={"message": "Can we talk in Spanish?"}
        ).get_json()

        assert body["language"] == "es"
        assert body["reason"] == "explicit-intent"

    def test_fallback_language(self, client):
        body = client.post(
            "/language/detect", json={"message": "ok", "fallbackLanguage": "es"}
        ).get_json()

        assert body["language"] == "es"
        assert body["reason"] == "fallback"

    def test_missing_message(self, client):
        assert client.post("/language/detect", json={"text": "hi"}).status_code == 400
