"""Tests for request payload schemas and runtime validation.

Validates:
- ``validate_payload`` raises ``ContractError`` for missing required keys
- ``validate_payload`` passes for valid payloads (optional keys may be absent)
- Error messages include the endpoint name and missing key names
"""

from __future__ import annotations

from typing import TypedDict

import pytest

from pser_kml.core.exceptions import ContractError
from pser_kml.models.payloads import AnalyzeRequest, ParseRequest, validate_payload


class TestValidatePayloadRejectsMissingKeys:
    """validate_payload raises ContractError for missing required keys."""

    def test_analyze_missing_feature(self) -> None:
        with pytest.raises(ContractError, match="feature") as exc_info:
            validate_payload({"documentContext": "<kml/>"}, AnalyzeRequest, endpoint="analyze")
        assert exc_info.value.code == "PAYLOAD_MISSING_KEYS"
        assert exc_info.value.stage == "analyze"

    def test_parse_missing_kml(self) -> None:
        with pytest.raises(ContractError, match="parse_kml: missing required payload key"):
            validate_payload({}, ParseRequest, endpoint="parse_kml")


class TestValidatePayloadAcceptsValid:
    """validate_payload passes when required keys are present."""

    def test_analyze_without_context(self) -> None:
        validate_payload({"feature": {}}, AnalyzeRequest, endpoint="analyze")

    def test_analyze_with_extra_keys(self) -> None:
        payload = {"feature": {}, "documentContext": "<kml/>", "clientVersion": "2"}
        validate_payload(payload, AnalyzeRequest, endpoint="analyze")

    def test_parse_with_kml(self) -> None:
        validate_payload({"kml": "<kml/>"}, ParseRequest, endpoint="parse_kml")

    def test_unregistered_schema_is_noop(self) -> None:
        class Other(TypedDict):
            anything: str

        validate_payload({}, Other, endpoint="other")
