"""Field extraction from a Feature's attribute mapping.

Each extractor walks its fallback chain, most specific first, and always
returns a string. Two lookup policies are used:

- ``find_exact``: case-insensitive key equality (project code, type).
- ``find_containing``: case-insensitive "key contains candidate"
  (location, status), deliberately broader so keys such as
  ``Site_Location`` or ``Current_Status`` still resolve.

For each candidate only the first matching key is read; an empty value
there moves the lookup on to the next candidate.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING

from pser_kml.activities.analyze_feature._constants import (
    COORDINATE_DECIMALS,
    LINEAR_INFRASTRUCTURE,
    LOCATION_KEYS,
    NO_LOCATION,
    NO_PROJECT_CODE,
    NO_STATUS,
    POINT_INFRASTRUCTURE,
    PROJECT_CODE_KEYS,
    PROJECT_CODE_NAME_PATTERN,
    PROJECT_TYPE_KEYS,
    STATUS_KEYS,
)

if TYPE_CHECKING:
    from pser_kml.models.feature import Feature

_PROJECT_CODE_RE = re.compile(PROJECT_CODE_NAME_PATTERN, re.IGNORECASE)

# ---------------------------------------------------------------------------
# Lookup policies
# ---------------------------------------------------------------------------


def find_exact(attributes: Mapping[str, str], candidates: Iterable[str]) -> str | None:
    """Return the value of the first candidate that equals a key (case-insensitive).

    Only the first key matching a candidate is considered; if its value
    is empty the next candidate is tried.
    """
    for candidate in candidates:
        value = _first_match(attributes, lambda key, c=candidate: key == c)
        if value:
            return value
    return None


def find_containing(attributes: Mapping[str, str], candidates: Iterable[str]) -> str | None:
    """Return the value of the first candidate contained in a key (case-insensitive)."""
    for candidate in candidates:
        value = _first_match(attributes, lambda key, c=candidate: c in key)
        if value:
            return value
    return None


def _first_match(attributes: Mapping[str, str], matches: Callable[[str], bool]) -> str | None:
    """Value of the first key (lower-cased) accepted by *matches*, in mapping order."""
    for key, value in attributes.items():
        if matches(key.lower()):
            return value
    return None


# ---------------------------------------------------------------------------
# Per-field extractors
# ---------------------------------------------------------------------------


def extract_project_code(feature: Feature) -> str:
    """Attribute, then a code-shaped token in the name, then the name itself."""
    value = find_exact(feature.attributes, PROJECT_CODE_KEYS)
    if value:
        return value

    match = _PROJECT_CODE_RE.search(feature.name)
    if match:
        return match.group(0)

    return feature.name or NO_PROJECT_CODE


def extract_location(feature: Feature) -> str:
    value = find_containing(feature.attributes, LOCATION_KEYS)
    if value:
        return value

    if feature.coordinates:
        lat, lon = feature.coordinates[0]
        return f"{_format_degrees(lat)}, {_format_degrees(lon)}"

    return NO_LOCATION


def _format_degrees(value: float) -> str:
    # Adding 0.0 turns -0.0 into 0.0 so it never renders as "-0.000000".
    return f"{value + 0.0:.{COORDINATE_DECIMALS}f}"


def extract_project_type(feature: Feature) -> str:
    """Attribute, otherwise inferred from geometry (path vs point)."""
    value = find_exact(feature.attributes, PROJECT_TYPE_KEYS)
    if value:
        return value

    if feature.is_linear:
        return LINEAR_INFRASTRUCTURE
    return POINT_INFRASTRUCTURE


def extract_status(feature: Feature) -> str:
    return find_containing(feature.attributes, STATUS_KEYS) or NO_STATUS
