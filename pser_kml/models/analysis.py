"""Pydantic model for the per-feature analysis result.

This is the flat object the map UI displays when a feature is selected.
Every text field is always populated: unresolved values carry a fixed
sentinel string, never ``None``.

Wire keys are camelCase (``projectCode``, ``additionalInfo``) to match
the browser client; Python code uses the snake_case field names.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AnalysisResult(BaseModel):
    """Derived summary of one selected Feature.

    Attributes:
        project_code: Project code from attributes, name pattern, or name.
        location: Location attribute or the first coordinate pair.
        project_type: Type attribute or a geometry-based sentinel.
        status: Status attribute or ``"Status not specified"``.
        description: Feature description or ``"No description provided"``.
        additional_info: Copy of the feature's ExtendedData attributes.
        interpretation: Templated narrative about the feature.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    project_code: str = Field(alias="projectCode")
    location: str
    project_type: str = Field(alias="projectType")
    status: str
    description: str
    additional_info: dict[str, str] = Field(default_factory=dict, alias="additionalInfo")
    interpretation: str

    def to_dict(self) -> dict[str, object]:
        """Serialise with the camelCase wire keys."""
        return self.model_dump(by_alias=True)
