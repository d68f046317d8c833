"""Triage Service HTTP handler.

Endpoints:
- POST /triage: full pipeline (crisis gate, screening, provider cascade)
- POST /crisis/assess: crisis assessment only
- POST /screening/next: next C-SSRS question or final outcome
- POST /language/detect: language code for voice selection

No raw message text is logged; requests are identified by text hash.
On any unexpected error the response still carries crisis line text
(safe failure mode).
"""
import asyncio
import logging
import os

from flask import Flask, jsonify, request

from tranquiloo.shared.models import SupportedLanguage
from tranquiloo.shared.utils import hash_text_for_audit
from tranquiloo.services.language_service import detect_language
from tranquiloo.services.safety_service import (
    assess_screening_responses,
    next_screening_question,
)
from .config import ProviderSettings
from .pipeline import build_pipeline

logger = logging.getLogger(__name__)

app = Flask(__name__)

settings = ProviderSettings.from_env()
pipeline = build_pipeline(settings)

SAFE_FAILURE_MESSAGE = (
    "I'm having trouble responding right now. If you are in crisis or thinking "
    "about harming yourself, call or text 988 (Suicide & Crisis Lifeline), text "
    "HOME to 741741, or call 911 in an emergency."
)


def _error(message: str, status: int):
    return jsonify({"error": message}), status


def _safe_failure(endpoint: str, error: Exception):
    logger.error(
        "REQUEST_FAILED",
        extra={
            "endpoint": endpoint,
            "error": str(error)[:200],
            "error_type": type(error).__name__,
            "action": "RETURNING_SAFE_FAILURE",
        }
    )
    return jsonify({
        "error": "Internal error",
        "responseText": SAFE_FAILURE_MESSAGE,
    }), 500


def _message_from(data):
    """Validated message field, or None."""
    if not isinstance(data, dict):
        return None
    message = data.get("message")
    if not isinstance(message, str) or not message.strip():
        return None
    return message


def _responses_from(data):
    responses = data.get("screeningResponses") or []
    if not isinstance(responses, list):
        raise ValueError("screeningResponses must be a list")
    return responses


@app.route("/health", methods=["GET"])
def health():
    """Health check endpoint.

    Returns:
        200 with service status and configured provider tiers
    """
    return jsonify({
        "status": "healthy",
        "service": "triage-service",
        "providers": {
            "primary": pipeline.orchestrator.primary is not None,
            "secondary": pipeline.orchestrator.secondary is not None,
            "crisis": pipeline.assessor.llm is not None,
        },
    }), 200


@app.route("/ready", methods=["GET"])
def ready():
    """Readiness check - the local tier is always available."""
    if pipeline is None:
        return jsonify({"status": "not_ready", "reason": "pipeline_not_initialized"}), 503
    return jsonify({"status": "ready"}), 200


@app.route("/triage", methods=["POST"])
def triage():
    """Triage one user message.

    Request Body:
        {
            "message": "User message text",
            "history": [{"role": "user", "content": "..."}] (optional),
            "screeningResponses": ["yes", "no"] (optional),
            "fallbackLanguage": "en" | "es" (optional)
        }

    Response:
        TriageResult as JSON (responseText, crisisAssessment, language,
        screeningRequired, nextQuestion, screeningOutcome, analysis)
    """
    try:
        data = request.get_json(silent=True)
        message = _message_from(data)
        if message is None:
            logger.warning("TRIAGE_REQUEST_INVALID", extra={"reason": "missing_message"})
            return _error("Missing required field: message", 400)

        history = data.get("history") or []
        if not isinstance(history, list) or not all(isinstance(t, dict) for t in history):
            return _error("history must be a list of objects", 400)
        try:
            responses = _responses_from(data)
        except ValueError as e:
            return _error(str(e), 400)
        fallback = SupportedLanguage.coerce(data.get("fallbackLanguage"), SupportedLanguage.EN)

        logger.info(
            "TRIAGE_REQUESTED",
            extra={
                "text_hash": hash_text_for_audit(message),
                "message_length": len(message),
                "history_turns": len(history),
                "screening_answers": len(responses),
            }
        )

        result = asyncio.run(pipeline.process(
            message,
            history=history,
            screening_responses=responses,
            fallback_language=fallback,
        ))
        return jsonify(result.to_dict()), 200

    except Exception as e:
        return _safe_failure("/triage", e)


@app.route("/crisis/assess", methods=["POST"])
def crisis_assess():
    """Crisis assessment for one message."""
    try:
        message = _message_from(request.get_json(silent=True))
        if message is None:
            return _error("Missing required field: message", 400)

        assessment = asyncio.run(pipeline.assessor.assess(message))
        body = assessment.to_dict()
        body["nextQuestion"] = (
            next_screening_question([]) if assessment.requires_screening else None
        )
        return jsonify(body), 200

    except Exception as e:
        return _safe_failure("/crisis/assess", e)


@app.route("/screening/next", methods=["POST"])
def screening_next():
    """Next C-SSRS question, or the outcome once all six are answered.

    Request Body:
        {"screeningResponses": [true, "no", ...]}
    """
    try:
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return _error("Request body must be an object", 400)
        try:
            responses = _responses_from(data)
        except ValueError as e:
            return _error(str(e), 400)

        question = next_screening_question(responses)
        body = {"nextQuestion": question, "complete": question is None, "outcome": None}
        if question is None:
            body["outcome"] = assess_screening_responses(responses).to_dict()
        return jsonify(body), 200

    except Exception as e:
        return _safe_failure("/screening/next", e)


@app.route("/language/detect", methods=["POST"])
def language_detect():
    """Language of a message, for text-to-speech voice selection."""
    try:
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not isinstance(data.get("message"), str):
            return _error("Missing required field: message", 400)

        fallback = SupportedLanguage.coerce(data.get("fallbackLanguage"), SupportedLanguage.EN)
        detection = detect_language(data["message"], fallback_language=fallback)
        return jsonify(detection.to_dict()), 200

    except Exception as e:
        return _safe_failure("/language/detect", e)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    port = int(os.getenv("PORT", "8080"))
    app.run(host="0.0.0.0", port=port)
