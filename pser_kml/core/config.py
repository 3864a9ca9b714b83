"""Analyzer configuration loaded from environment variables.

Azure Functions app settings (or ``local.settings.json`` for local dev)
are the source of truth. Every value has a default, so library callers
can use ``AnalyzerConfig()`` directly.

``from_env()`` raises ``ConfigValidationError`` for out-of-range or
unknown values so a bad setting fails the request loudly instead of
silently changing parse or distance behaviour.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from pser_kml.core.exceptions import PipelineError

COORDINATE_POLICIES = frozenset({"skip", "reject"})
DISTANCE_METHODS = frozenset({"haversine", "geodesic"})

DEFAULT_MAX_DOCUMENT_BYTES = 10 * 1024 * 1024


class ConfigValidationError(PipelineError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class AnalyzerConfig:
    """Immutable parse/analyze configuration.

    Attributes:
        max_document_bytes: Largest KML document (UTF-8 bytes) the parser accepts.
        coordinate_policy: ``"skip"`` drops malformed coordinate tokens,
            ``"reject"`` drops the whole placemark containing one.
        distance_method: ``"haversine"`` (spherical, R = 6371 km) or
            ``"geodesic"`` (WGS 84 ellipsoid via pyproj).
    """

    max_document_bytes: int = DEFAULT_MAX_DOCUMENT_BYTES
    coordinate_policy: str = "skip"
    distance_method: str = "haversine"

    @classmethod
    def from_env(cls) -> AnalyzerConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is not an integer where one
                is expected, out of range, or unknown.
        """
        raw_max_bytes = os.getenv("MAX_DOCUMENT_BYTES", str(DEFAULT_MAX_DOCUMENT_BYTES))
        try:
            max_document_bytes = int(raw_max_bytes)
        except ValueError as exc:
            raise ConfigValidationError(
                "MAX_DOCUMENT_BYTES", raw_max_bytes, "must be an integer (bytes)"
            ) from exc

        config = cls(
            max_document_bytes=max_document_bytes,
            coordinate_policy=os.getenv("COORDINATE_POLICY", "skip").strip().lower(),
            distance_method=os.getenv("DISTANCE_METHOD", "haversine").strip().lower(),
        )
        _validate(config)
        return config


def _validate(config: AnalyzerConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if config.max_document_bytes <= 0:
        raise ConfigValidationError(
            "MAX_DOCUMENT_BYTES",
            config.max_document_bytes,
            "must be > 0 (bytes)",
        )

    if config.coordinate_policy not in COORDINATE_POLICIES:
        raise ConfigValidationError(
            "COORDINATE_POLICY",
            config.coordinate_policy,
            f"must be one of {', '.join(sorted(COORDINATE_POLICIES))}",
        )

    if config.distance_method not in DISTANCE_METHODS:
        raise ConfigValidationError(
            "DISTANCE_METHOD",
            config.distance_method,
            f"must be one of {', '.join(sorted(DISTANCE_METHODS))}",
        )
