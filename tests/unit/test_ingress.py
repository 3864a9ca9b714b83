"""Tests for the HTTP ingress helpers.

Validates:
- ``deserialize_request_json`` handles bytes, JSON strings, dicts and bad input
- ``read_kml_text`` accepts raw KML and ``{"kml": ...}`` bodies
- ``handle_parse_request`` returns 200 / 400 / 500 with the documented bodies
- ``handle_analyze_request`` returns 200 / 500 with the documented bodies
"""

from __future__ import annotations

import json
import os
from unittest.mock import patch

import pytest

from pser_kml.activities.parse_kml import KmlParseError
from pser_kml.core.exceptions import ContractError
from pser_kml.core.ingress import (
    ANALYZE_ERROR_MESSAGE,
    PARSE_ERROR_MESSAGE,
    deserialize_request_json,
    handle_analyze_request,
    handle_parse_request,
    read_kml_text,
)


@pytest.fixture(autouse=True)
def _clean_env():
    """Run every test with default configuration."""
    with patch.dict(os.environ, {}, clear=True):
        yield


# ---------------------------------------------------------------------------
# deserialize_request_json
# ---------------------------------------------------------------------------


class TestDeserializeRequestJson:
    """Normalise raw request bodies to a dict."""

    def test_json_bytes_parsed(self) -> None:
        assert deserialize_request_json(b'{"feature": {}}') == {"feature": {}}

    def test_json_string_parsed(self) -> None:
        assert deserialize_request_json('{"a": 1}') == {"a": 1}

    def test_utf8_bom_tolerated(self) -> None:
        assert deserialize_request_json(b'\xef\xbb\xbf{"a": 1}') == {"a": 1}

    def test_dict_passthrough(self) -> None:
        payload = {"feature": {"name": "x"}}
        assert deserialize_request_json(payload) is payload

    def test_invalid_json_raises_contract_error(self) -> None:
        with pytest.raises(ContractError, match="not valid JSON") as exc_info:
            deserialize_request_json("{not-json")
        assert exc_info.value.code == "INVALID_JSON"
        assert exc_info.value.stage == "ingress"

    def test_json_array_raises_contract_error(self) -> None:
        with pytest.raises(ContractError, match="must be an object") as exc_info:
            deserialize_request_json("[1, 2, 3]")
        assert exc_info.value.code == "INVALID_INPUT_TYPE"

    def test_invalid_utf8_raises_contract_error(self) -> None:
        with pytest.raises(ContractError) as exc_info:
            deserialize_request_json(b"\xff\xfe{")
        assert exc_info.value.code == "INVALID_ENCODING"

    def test_unexpected_type_raises_contract_error(self) -> None:
        with pytest.raises(ContractError, match="Unexpected request body type"):
            deserialize_request_json(42)


# ---------------------------------------------------------------------------
# read_kml_text
# ---------------------------------------------------------------------------


class TestReadKmlText:
    """Extract document text from a parse request body."""

    def test_raw_body(self) -> None:
        assert read_kml_text(b"<kml/>", "application/vnd.google-earth.kml+xml") == "<kml/>"

    def test_raw_body_without_content_type(self) -> None:
        assert read_kml_text(b"<kml/>") == "<kml/>"

    def test_json_body(self) -> None:
        body = json.dumps({"kml": "<kml/>"}).encode()
        assert read_kml_text(body, "application/json; charset=utf-8") == "<kml/>"

    def test_json_body_missing_key(self) -> None:
        with pytest.raises(ContractError, match="kml") as exc_info:
            read_kml_text(b"{}", "application/json")
        assert exc_info.value.code == "PAYLOAD_MISSING_KEYS"

    def test_json_body_non_string(self) -> None:
        with pytest.raises(ContractError, match="must be a string"):
            read_kml_text(b'{"kml": 5}', "application/json")

    def test_raw_body_not_utf8(self) -> None:
        with pytest.raises(KmlParseError, match="UTF-8"):
            read_kml_text(b"\xff\xfe<kml/>")


# ---------------------------------------------------------------------------
# handle_parse_request
# ---------------------------------------------------------------------------


class TestHandleParseRequest:
    """Parse endpoint status codes and bodies."""

    def test_success(self, mixed_features_kml: str) -> None:
        status, body = handle_parse_request(mixed_features_kml.encode("utf-8"))
        assert status == 200
        assert len(body["features"]) == 3  # type: ignore[arg-type]
        assert body["rawXml"] == mixed_features_kml
        assert body["droppedCount"] == 0
        assert body["bounds"] is not None

    def test_feature_dicts_are_lat_lon(self, mixed_features_kml: str) -> None:
        _, body = handle_parse_request(mixed_features_kml.encode("utf-8"))
        first = body["features"][0]  # type: ignore[index]
        assert first["coordinates"][0] == [14.5995, 120.9842]

    def test_zero_features_is_success(self, empty_kml: str) -> None:
        status, body = handle_parse_request(empty_kml.encode("utf-8"))
        assert status == 200
        assert body["features"] == []
        assert body["bounds"] is None

    def test_not_xml_is_400(self, not_xml_kml: str) -> None:
        status, body = handle_parse_request(not_xml_kml.encode("utf-8"))
        assert status == 400
        assert body["error"] == PARSE_ERROR_MESSAGE
        assert body["code"] == "KML_PARSE_FAILED"

    def test_error_body_carries_taxonomy(self, not_xml_kml: str) -> None:
        _, body = handle_parse_request(not_xml_kml.encode("utf-8"), correlation_id="inv-1")
        assert body["stage"] == "parse_kml"
        assert body["category"] == "validation"
        assert body["retryable"] is False
        assert body["correlationId"] == "inv-1"

    def test_feature_wire_keys(self, mixed_features_kml: str) -> None:
        _, body = handle_parse_request(mixed_features_kml.encode("utf-8"))
        first = body["features"][0]  # type: ignore[index]
        assert "rawMarkup" in first
        assert "raw_markup" not in first

    def test_bad_json_body_is_400(self) -> None:
        status, body = handle_parse_request(b"{nope", "application/json")
        assert status == 400
        assert body["code"] == "INVALID_JSON"

    def test_size_limit_from_env(self, mixed_features_kml: str) -> None:
        with patch.dict(os.environ, {"MAX_DOCUMENT_BYTES": "100"}):
            status, body = handle_parse_request(mixed_features_kml.encode("utf-8"))
        assert status == 400
        assert body["code"] == "KML_DOCUMENT_TOO_LARGE"

    def test_bad_config_is_500(self, mixed_features_kml: str) -> None:
        with patch.dict(os.environ, {"COORDINATE_POLICY": "clamp"}):
            status, body = handle_parse_request(mixed_features_kml.encode("utf-8"))
        assert status == 500
        assert body["code"] == "CONFIG_VALIDATION_FAILED"


# ---------------------------------------------------------------------------
# handle_analyze_request
# ---------------------------------------------------------------------------


class TestHandleAnalyzeRequest:
    """Analyze endpoint status codes and bodies."""

    def _body(self, **payload: object) -> bytes:
        return json.dumps(payload).encode("utf-8")

    def test_success(self) -> None:
        feature = {
            "name": "Line ABC-4567 Sector",
            "description": "Distribution feeder",
            "coordinates": [[0, 0], [0, 1]],
            "attributes": {"Status": "Energized"},
        }
        status, body = handle_analyze_request(self._body(feature=feature, documentContext="<kml/>"))
        assert status == 200
        assert body["projectCode"] == "ABC-4567"
        assert body["status"] == "Energized"
        assert body["projectType"] == "Linear infrastructure (Power line, Road, Pipeline, etc.)"
        assert "111.19 km" in body["interpretation"]  # type: ignore[operator]
        assert "distribution line project" in body["interpretation"]  # type: ignore[operator]

    def test_legacy_context_key(self) -> None:
        feature = {"name": "P", "coordinates": [[1, 2]]}
        status, _ = handle_analyze_request(self._body(feature=feature, kmlContext="<kml/>"))
        assert status == 200

    def test_accepts_round_tripped_parse_output(self, mixed_features_kml: str) -> None:
        _, parsed = handle_parse_request(mixed_features_kml.encode("utf-8"))
        feature = parsed["features"][1]  # type: ignore[index]
        status, body = handle_analyze_request(
            self._body(feature=feature, documentContext=parsed["rawXml"])
        )
        assert status == 200
        assert body["projectCode"] == "PSER-1234"
        assert body["projectType"] == "Substation"

    def test_missing_coordinates_is_500(self) -> None:
        status, body = handle_analyze_request(self._body(feature={"name": "X"}))
        assert status == 500
        assert body["error"] == ANALYZE_ERROR_MESSAGE
        assert body["code"] == "FEATURE_ANALYSIS_FAILED"

    def test_analysis_error_is_retryable(self) -> None:
        status, body = handle_analyze_request(
            self._body(feature={"name": "X", "coordinates": []}), correlation_id="inv-2"
        )
        assert status == 500
        assert body["category"] == "transient"
        assert body["retryable"] is True
        assert body["stage"] == "analyze_feature"
        assert body["correlationId"] == "inv-2"

    def test_near_antipodal_line_succeeds(self) -> None:
        feature = {"name": "Span", "coordinates": [[0.08, 0.0], [-0.08, 180.0]]}
        status, body = handle_analyze_request(self._body(feature=feature))
        assert status == 200
        assert "20015.09 km" in body["interpretation"]  # type: ignore[operator]

    def test_missing_feature_key_is_500(self) -> None:
        status, body = handle_analyze_request(self._body(documentContext="<kml/>"))
        assert status == 500
        assert body["code"] == "PAYLOAD_MISSING_KEYS"

    def test_invalid_json_is_500(self) -> None:
        status, body = handle_analyze_request(b"not json")
        assert status == 500
        assert body["code"] == "INVALID_JSON"

    def test_non_string_context_is_500(self) -> None:
        feature = {"name": "P", "coordinates": [[1, 2]]}
        status, body = handle_analyze_request(self._body(feature=feature, documentContext=5))
        assert status == 500
        assert body["code"] == "INVALID_INPUT_TYPE"

    def test_unexpected_error_is_500(self) -> None:
        feature = {"name": "P", "coordinates": [[1, 2]]}
        with patch(
            "pser_kml.activities.analyze_feature.analyze_feature",
            side_effect=RuntimeError("boom"),
        ):
            status, body = handle_analyze_request(self._body(feature=feature))
        assert status == 500
        assert body["code"] == "INTERNAL_ERROR"
        assert body["error"] == ANALYZE_ERROR_MESSAGE
        assert body["detail"] == "Unexpected error"
        assert body["category"] == "permanent"
