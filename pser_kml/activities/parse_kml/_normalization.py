"""Coordinate and attribute normalisation helpers for KML parsing.

Responsibilities:
- Parse KML coordinate text (``lon,lat[,alt]`` tokens) into ``(lat, lon)`` pairs
- Apply the malformed-token policy (skip the token or reject the placemark)
- Extract ExtendedData attributes (``Data/value`` and ``SchemaData/SimpleData``)
- Read element text the way a browser's ``textContent`` does
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from pser_kml.activities.parse_kml._constants import (
    DATA_TAG,
    EXTENDED_DATA_TAG,
    POLICY_REJECT,
    SIMPLE_DATA_TAG,
    VALUE_TAG,
)
from pser_kml.activities.parse_kml._validation import KmlValidationError, local_name

if TYPE_CHECKING:
    from lxml.etree import _Element

logger = logging.getLogger("pser_kml.activities.parse_kml")

# ---------------------------------------------------------------------------
# Element text
# ---------------------------------------------------------------------------


def element_text(elem: _Element | None) -> str:
    """Return the concatenated, stripped text content of *elem* (``""`` if absent)."""
    if elem is None:
        return ""
    return "".join(elem.itertext()).strip()


def first_child(elem: _Element, name: str) -> _Element | None:
    """Return the first direct child of *elem* with local name *name*."""
    for child in elem:
        if local_name(child) == name:
            return child
    return None


def first_descendant(elem: _Element, name: str) -> _Element | None:
    """Return the first descendant of *elem* with local name *name*, in document order."""
    for node in elem.iterdescendants():
        if local_name(node) == name:
            return node
    return None


# ---------------------------------------------------------------------------
# KML coordinate text parsing
# ---------------------------------------------------------------------------


def parse_coordinates_text(
    text: str,
    *,
    policy: str = "skip",
    placemark_name: str = "",
) -> list[tuple[float, float]]:
    """Parse KML coordinate text into ``(lat, lon)`` pairs.

    KML writes each point as ``lon,lat[,alt]``; the pair order is swapped
    here so everything downstream works in ``(lat, lon)``. Altitude is
    dropped.

    A token with fewer than two components, or whose longitude/latitude
    is not a finite number, is malformed. With ``policy="skip"`` it is
    logged and ignored; with ``policy="reject"`` the placemark fails.

    Raises:
        KmlValidationError: On a malformed token when *policy* is ``"reject"``.
    """
    coords: list[tuple[float, float]] = []
    for position, token in enumerate(text.split()):
        pair = _parse_token(token)
        if pair is None:
            if policy == POLICY_REJECT:
                msg = (
                    f"Malformed coordinate token {token!r} at position {position} "
                    f"in Placemark '{placemark_name}'"
                )
                raise KmlValidationError(msg)
            logger.warning(
                "Skipping malformed coordinate token | token=%r | position=%d | placemark=%s",
                token,
                position,
                placemark_name,
            )
            continue
        coords.append(pair)
    return coords


def _parse_token(token: str) -> tuple[float, float] | None:
    """Return ``(lat, lon)`` for one ``lon,lat[,alt]`` token, or ``None`` if malformed."""
    parts = token.split(",")
    if len(parts) < 2:
        return None
    try:
        lon = float(parts[0])
        lat = float(parts[1])
    except ValueError:
        return None
    if not (math.isfinite(lon) and math.isfinite(lat)):
        return None
    return (lat, lon)


# ---------------------------------------------------------------------------
# ExtendedData attribute extraction
# ---------------------------------------------------------------------------


def extract_attributes(placemark_elem: _Element) -> dict[str, str]:
    """Extract ExtendedData attributes from a Placemark element.

    Handles both KML metadata patterns, walked together in document order:
    - ``ExtendedData/Data/value`` — untyped key-value pairs.
    - ``ExtendedData/SchemaData/SimpleData`` — typed fields.

    Entries without a ``name`` attribute are ignored. When a key repeats,
    the last occurrence wins. Empty values are kept as ``""``.
    """
    attributes: dict[str, str] = {}
    for extended in placemark_elem:
        if local_name(extended) != EXTENDED_DATA_TAG:
            continue
        for node in extended.iterdescendants():
            tag = local_name(node)
            if tag == DATA_TAG:
                key = (node.get("name") or "").strip()
                value_elem = first_child(node, VALUE_TAG)
                if key and value_elem is not None:
                    attributes[key] = element_text(value_elem)
            elif tag == SIMPLE_DATA_TAG:
                key = (node.get("name") or "").strip()
                if key:
                    attributes[key] = element_text(node)
    return attributes
