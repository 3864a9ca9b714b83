"""Feature analysis activity — Feature Analyzer.

Derives project code, location, project type and status for one
selected Feature through layered fallbacks, and builds a templated
interpretation. Deterministic and side-effect free apart from logging:
the same feature and configuration always give the same result.

Stages:
- **_fields**: exact/substring attribute lookup and per-field fallbacks
- **_interpretation**: ordered sentence templates and keyword rules
- **pser_kml.utils.geodesy**: path length for multi-point features

Only structurally invalid input raises (``AnalysisError``). Missing
attributes never do: every field has a sentinel.
"""

from __future__ import annotations

import logging
from typing import Any

from pser_kml.activities.analyze_feature._constants import NO_DESCRIPTION
from pser_kml.activities.analyze_feature._fields import (
    extract_location,
    extract_project_code,
    extract_project_type,
    extract_status,
    find_containing,
    find_exact,
)
from pser_kml.activities.analyze_feature._interpretation import (
    build_interpretation,
    keyword_sentence,
)
from pser_kml.core.config import AnalyzerConfig
from pser_kml.core.exceptions import TransientError
from pser_kml.models.analysis import AnalysisResult
from pser_kml.models.feature import Feature

logger = logging.getLogger("pser_kml.activities.analyze_feature")

__all__ = [
    "AnalysisError",
    "analyze_feature",
    "build_interpretation",
    "extract_location",
    "extract_project_code",
    "extract_project_type",
    "extract_status",
    "feature_from_payload",
    "find_containing",
    "find_exact",
    "keyword_sentence",
]


class AnalysisError(TransientError):
    """Raised when a feature is structurally invalid for analysis.

    The caller keeps showing the previous selection and result; the
    user may pick another feature or retry.
    """

    default_stage = "analyze_feature"
    default_code = "FEATURE_ANALYSIS_FAILED"


def feature_from_payload(payload: object) -> Feature:
    """Build a Feature from a decoded JSON ``feature`` object.

    Raises:
        AnalysisError: If the payload is not an object or its
            coordinates are missing, empty or malformed.
    """
    if not isinstance(payload, dict):
        msg = f"Feature payload must be an object, got {type(payload).__name__}"
        raise AnalysisError(msg)
    try:
        return Feature.from_dict(payload)
    except (TypeError, ValueError) as exc:
        msg = f"Feature is not valid for analysis: {exc}"
        raise AnalysisError(msg) from exc


def analyze_feature(
    feature: Feature | dict[str, Any],
    document_context: str | None = None,
    *,
    config: AnalyzerConfig | None = None,
) -> AnalysisResult:
    """Analyze one feature.

    Args:
        feature: A parsed Feature, or its JSON dict form.
        document_context: Raw KML of the whole document. Accepted for
            future use; the current heuristics do not read it.
        config: Distance method selection. Defaults to ``AnalyzerConfig()``.

    Returns:
        ``AnalysisResult`` with every field populated.

    Raises:
        AnalysisError: If the feature has no coordinates or is malformed.
    """
    config = config or AnalyzerConfig()
    if not isinstance(feature, Feature):
        feature = feature_from_payload(feature)

    if not feature.coordinates:
        msg = f"Feature '{feature.name}' has no coordinates"
        raise AnalysisError(msg)

    result = AnalysisResult(
        project_code=extract_project_code(feature),
        location=extract_location(feature),
        project_type=extract_project_type(feature),
        status=extract_status(feature),
        description=feature.description or NO_DESCRIPTION,
        additional_info=dict(feature.attributes),
        interpretation=build_interpretation(feature, distance_method=config.distance_method),
    )

    logger.info(
        "Feature analyzed | name=%s | points=%d | attributes=%d | code=%s | context_bytes=%d",
        feature.name,
        len(feature.coordinates),
        len(feature.attributes),
        result.project_code,
        len(document_context or ""),
    )
    return result
