"""Azure Functions entry point — PSER KML Analyzer.

This module registers the HTTP functions using the Python v2 programming
model. All business logic lives in the pser_kml package; this file is
purely the wiring layer between the HTTP bindings and application code.

Routes (under the host's ``/api`` prefix):
- ``POST /api/kml/parse``  — KML document → features
- ``POST /api/analyze``    — selected feature → analysis result
"""

from __future__ import annotations

import json
import logging

import azure.functions as func

from pser_kml.core.ingress import handle_analyze_request, handle_parse_request

app = func.FunctionApp(http_auth_level=func.AuthLevel.ANONYMOUS)

logger = logging.getLogger("pser_kml.function_app")


def _json_response(status_code: int, body: dict[str, object]) -> func.HttpResponse:
    return func.HttpResponse(
        json.dumps(body),
        status_code=status_code,
        mimetype="application/json",
    )


# ---------------------------------------------------------------------------
# HTTP: Parse KML
# ---------------------------------------------------------------------------


@app.function_name("parse_kml")
@app.route(route="kml/parse", methods=["POST"])
def parse_kml_http(req: func.HttpRequest, context: func.Context) -> func.HttpResponse:
    """Parse an uploaded KML document.

    Body: the raw KML text, or ``{"kml": "<text>"}`` with a JSON content type.

    Returns:
        200 with ``features``, ``rawXml``, ``droppedCount``, ``dropped`` and
        ``bounds``; 400 with an ``error`` message if the body is not KML.
    """
    body = req.get_body()
    content_type = req.headers.get("Content-Type", "")

    logger.info(
        "parse_kml request | bytes=%d | content_type=%s | correlation_id=%s",
        len(body),
        content_type,
        context.invocation_id,
    )

    status_code, payload = handle_parse_request(
        body, content_type, correlation_id=context.invocation_id
    )

    logger.info(
        "parse_kml response | status=%d | features=%d",
        status_code,
        len(payload.get("features", [])),  # type: ignore[arg-type]
    )
    return _json_response(status_code, payload)


# ---------------------------------------------------------------------------
# HTTP: Analyze Feature
# ---------------------------------------------------------------------------


@app.function_name("analyze_feature")
@app.route(route="analyze", methods=["POST"])
def analyze_feature_http(req: func.HttpRequest, context: func.Context) -> func.HttpResponse:
    """Analyze the selected feature.

    Body: ``{"feature": {...}, "documentContext": "<kml>"}``.

    Returns:
        200 with the analysis result; 500 with an ``error`` message on failure.
    """
    status_code, payload = handle_analyze_request(
        req.get_body(), correlation_id=context.invocation_id
    )

    logger.info(
        "analyze_feature response | status=%d | correlation_id=%s",
        status_code,
        context.invocation_id,
    )
    return _json_response(status_code, payload)
