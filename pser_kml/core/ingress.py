"""Thin ingress boundary helpers for the HTTP entry points.

Centralises the transport concerns so that ``function_app.py`` only
binds routes and copies status/body into an ``HttpResponse``:

- **deserialize_request_json** — decodes a JSON request body to a dict,
  raising ``ContractError`` for anything else.
- **handle_parse_request** — raw KML (or ``{"kml": ...}``) → parsed
  document body, or a 400 error body when the text is not KML.
- **handle_analyze_request** — ``{"feature", "documentContext"}`` →
  analysis body, or a 500 error body on any failure.

Handlers return ``(status_code, body_dict)`` and never raise, so they
can be tested without the Functions runtime.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pser_kml.core.config import AnalyzerConfig, ConfigValidationError
from pser_kml.core.exceptions import ContractError, PipelineError
from pser_kml.models.payloads import AnalyzeRequest, ParseRequest, validate_payload

logger = logging.getLogger("pser_kml.core.ingress")

PARSE_ERROR_MESSAGE = "Error parsing KML file. Please ensure it is a valid KML file."
ANALYZE_ERROR_MESSAGE = "Failed to analyze feature"

HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_SERVER_ERROR = 500


# ---------------------------------------------------------------------------
# Request body decoding
# ---------------------------------------------------------------------------


def deserialize_request_json(raw: str | bytes | dict[str, Any] | object) -> dict[str, Any]:
    """Normalise a request body to a plain dict.

    Accepts the body as bytes, a JSON string, or an already-decoded dict.

    Raises:
        ContractError: If the body is not valid JSON or not a JSON object.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            msg = f"Request body is not valid UTF-8: {exc}"
            raise ContractError(msg, stage="ingress", code="INVALID_ENCODING") from exc
    if isinstance(raw, str):
        try:
            parsed = json.loads(raw)
        except (json.JSONDecodeError, ValueError) as exc:
            msg = f"Request body is not valid JSON: {exc}"
            raise ContractError(msg, stage="ingress", code="INVALID_JSON") from exc
        if not isinstance(parsed, dict):
            msg = f"Request JSON must be an object, got {type(parsed).__name__}"
            raise ContractError(msg, stage="ingress", code="INVALID_INPUT_TYPE")
        return parsed
    if isinstance(raw, dict):
        return raw
    msg = f"Unexpected request body type: {type(raw).__name__}"
    raise ContractError(msg, stage="ingress", code="INVALID_INPUT_TYPE")


def _error_body(message: str, exc: PipelineError, correlation_id: str = "") -> dict[str, object]:
    """Build the JSON error body from ``exc.to_error_dict()`` with camelCase keys."""
    if correlation_id and not exc.correlation_id:
        exc.correlation_id = correlation_id
    error = exc.to_error_dict()
    return {
        "error": message,
        "detail": error["message"],
        "code": error["code"],
        "stage": error["stage"],
        "category": error["category"],
        "retryable": error["retryable"],
        "correlationId": error["correlation_id"],
    }


def _is_json(content_type: str) -> bool:
    return content_type.split(";", 1)[0].strip().lower() == "application/json"


# ---------------------------------------------------------------------------
# Parse endpoint
# ---------------------------------------------------------------------------


def read_kml_text(body: bytes, content_type: str = "") -> str:
    """Extract the KML document text from a parse request body.

    A JSON body must be ``{"kml": "<document>"}``; any other content type
    is treated as the raw document in UTF-8.

    Raises:
        ContractError: If a JSON body is malformed or lacks ``kml``.
        KmlParseError: If a raw body is not valid UTF-8.
    """
    if _is_json(content_type):
        payload = deserialize_request_json(body)
        validate_payload(payload, ParseRequest, endpoint="parse_kml")
        text = payload["kml"]
        if not isinstance(text, str):
            msg = f"parse_kml: 'kml' must be a string, got {type(text).__name__}"
            raise ContractError(msg, stage="parse_kml", code="INVALID_INPUT_TYPE")
        return text

    from pser_kml.activities.parse_kml import KmlParseError

    try:
        return body.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        msg = f"KML document is not valid UTF-8: {exc}"
        raise KmlParseError(msg) from exc


def handle_parse_request(
    body: bytes, content_type: str = "", *, correlation_id: str = ""
) -> tuple[int, dict[str, object]]:
    """Parse an uploaded document and build the HTTP status and body.

    Returns:
        ``(200, ParsedDocument.to_dict())`` on success, ``(400, error)``
        when the input is not KML, ``(500, error)`` on bad configuration.
    """
    from pser_kml.activities.parse_kml import parse_kml_text

    try:
        config = AnalyzerConfig.from_env()
    except ConfigValidationError as exc:
        logger.exception("Invalid analyzer configuration")
        return HTTP_SERVER_ERROR, _error_body(PARSE_ERROR_MESSAGE, exc, correlation_id)

    try:
        text = read_kml_text(body, content_type)
        document = parse_kml_text(text, config=config)
    except PipelineError as exc:
        logger.warning(
            "KML parse rejected | code=%s | correlation_id=%s | %s",
            exc.code,
            correlation_id,
            exc.message,
        )
        return HTTP_BAD_REQUEST, _error_body(PARSE_ERROR_MESSAGE, exc, correlation_id)

    return HTTP_OK, document.to_dict()


# ---------------------------------------------------------------------------
# Analyze endpoint
# ---------------------------------------------------------------------------


def handle_analyze_request(
    body: bytes | str | dict[str, Any], *, correlation_id: str = ""
) -> tuple[int, dict[str, object]]:
    """Analyze the requested feature and build the HTTP status and body.

    Returns:
        ``(200, AnalysisResult.to_dict())`` on success, otherwise
        ``(500, {"error": "Failed to analyze feature", ...})``.
    """
    from pser_kml.activities.analyze_feature import analyze_feature

    try:
        payload = deserialize_request_json(body)
        validate_payload(payload, AnalyzeRequest, endpoint="analyze_feature")
        context = payload.get("documentContext", payload.get("kmlContext"))
        if context is not None and not isinstance(context, str):
            msg = f"documentContext must be a string, got {type(context).__name__}"
            raise ContractError(msg, stage="analyze_feature", code="INVALID_INPUT_TYPE")
        result = analyze_feature(payload["feature"], context, config=AnalyzerConfig.from_env())
    except PipelineError as exc:
        logger.warning(
            "Feature analysis failed | code=%s | correlation_id=%s | %s",
            exc.code,
            correlation_id,
            exc.message,
        )
        return HTTP_SERVER_ERROR, _error_body(ANALYZE_ERROR_MESSAGE, exc, correlation_id)
    except Exception:
        logger.exception(
            "Unexpected error during feature analysis | correlation_id=%s", correlation_id
        )
        internal = PipelineError("Unexpected error", stage="analyze_feature", code="INTERNAL_ERROR")
        return HTTP_SERVER_ERROR, _error_body(ANALYZE_ERROR_MESSAGE, internal, correlation_id)

    return HTTP_OK, result.to_dict()
