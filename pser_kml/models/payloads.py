"""Typed request schemas for the HTTP entry points.

Each endpoint receives a JSON object. These ``TypedDict`` definitions
make the contracts explicit and ``validate_payload`` enforces the
required keys at runtime.

Usage::

    from pser_kml.models.payloads import AnalyzeRequest, validate_payload

    validate_payload(body, AnalyzeRequest, endpoint="analyze")
"""

from __future__ import annotations

from typing import Any, NotRequired, TypedDict

from pser_kml.core.exceptions import ContractError

# ---------------------------------------------------------------------------
# Parse endpoint
# ---------------------------------------------------------------------------


class ParseRequest(TypedDict):
    """JSON form of ``POST /api/kml/parse`` (raw KML bodies skip this)."""

    kml: str


# ---------------------------------------------------------------------------
# Analyze endpoint
# ---------------------------------------------------------------------------


class AnalyzeRequest(TypedDict):
    """Body of ``POST /api/analyze``.

    ``kmlContext`` is the name the browser client used before
    ``documentContext``; either is accepted.
    """

    feature: dict[str, Any]
    documentContext: NotRequired[str | None]
    kmlContext: NotRequired[str | None]


# ---------------------------------------------------------------------------
# Required-key registrations (used by validate_payload)
# ---------------------------------------------------------------------------

_REQUIRED_KEYS: dict[type, frozenset[str]] = {
    ParseRequest: frozenset({"kml"}),
    AnalyzeRequest: frozenset({"feature"}),
}


def validate_payload(
    raw: dict[str, Any],
    schema: type,
    *,
    endpoint: str,
) -> None:
    """Validate that *raw* contains the required keys for *schema*.

    Raises:
        ContractError: If required keys are missing from the payload.
    """
    required = _REQUIRED_KEYS.get(schema)
    if required is None:
        return

    missing = required - raw.keys()
    if missing:
        msg = f"{endpoint}: missing required payload key(s): {', '.join(sorted(missing))}"
        raise ContractError(msg, stage=endpoint, code="PAYLOAD_MISSING_KEYS")
