"""Templated narrative for a selected feature.

Sentences are appended in a fixed order and joined with single spaces:
identity, geometry (with path length for lines), attribute count, and
at most one keyword sentence taken from the description.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pser_kml.activities.analyze_feature._constants import KEYWORD_SENTENCES, PROJECT_LABEL
from pser_kml.utils.geodesy import path_length_km

if TYPE_CHECKING:
    from pser_kml.models.feature import Feature


def keyword_sentence(description: str) -> str | None:
    """Return the sentence for the first keyword found in *description*, if any."""
    text = description.lower()
    for keyword, sentence in KEYWORD_SENTENCES:
        if keyword in text:
            return sentence
    return None


def build_interpretation(feature: Feature, *, distance_method: str = "haversine") -> str:
    parts = [f'This is a {PROJECT_LABEL} project feature named "{feature.name}".']

    if feature.is_linear:
        distance_km = path_length_km(feature.coordinates, method=distance_method)
        parts.append(
            f"It represents a linear structure spanning approximately {distance_km:.2f} km."
        )
    else:
        parts.append("It represents a point location.")

    if feature.attributes:
        parts.append(f"The feature contains {len(feature.attributes)} extended data attributes.")

    sentence = keyword_sentence(feature.description)
    if sentence:
        parts.append(sentence)

    return " ".join(parts)
