"""Domain exception taxonomy.

Every exception raised by the parser, the analyzer, configuration loading
and the HTTP ingress inherits from ``PipelineError`` and carries the same
structured context. The ingress turns ``to_error_dict()`` into the JSON
error body, so ``category`` and ``retryable`` reach the client.

Taxonomy categories
-------------------
- ``ValidationError``   — the uploaded document is unusable (``KmlParseError``).
- ``TransientError``    — the request failed but the UI keeps its state and
  the user may retry or pick another feature (``AnalysisError``).
- ``ContractError``     — request payload does not match the expected shape.

Anything else (``ConfigValidationError``, unexpected failures) is
categorised from ``retryable``: ``"transient"`` or ``"permanent"``.

Silent field fallbacks in the analyzer are *not* errors and never raise.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for all parse/analyze errors.

    Attributes:
        message: Human-readable error description.
        stage: Stage where the error occurred (``"parse_kml"``,
            ``"analyze_feature"``, ``"ingress"``, ``"config"``).
        code: Machine-readable error code (e.g. ``"KML_PARSE_FAILED"``).
        retryable: Whether repeating the same request could succeed.
        correlation_id: Functions invocation id of the failed request, if known.
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""
    #: Default retryability for subclasses.
    default_retryable: bool = False
    #: Fixed category for the category base classes; ``None`` derives it.
    fixed_category: str | None = None

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool | None = None,
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = self.default_retryable if retryable is None else retryable
        self.correlation_id = correlation_id
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category (class-defined, else from ``retryable``)."""
        if self.fixed_category:
            return self.fixed_category
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(PipelineError):
    """The submitted document itself is unusable. Not retryable."""

    fixed_category = "validation"


class TransientError(PipelineError):
    """The request failed without changing client state; retrying is safe."""

    default_retryable = True
    fixed_category = "transient"


class ContractError(PipelineError):
    """Request payload does not match the documented shape. Not retryable."""

    fixed_category = "contract"
