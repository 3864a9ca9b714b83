"""lxml element-tree walker that turns Placemarks into Features.

Works on an already-loaded root element, so the XML tokeniser can be
swapped (see ``XmlLoader``). Placemarks are found at any depth (nested
Folder/Document hierarchies) and in any namespace.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pser_kml.activities.parse_kml._constants import (
    COORDINATES_TAG,
    DESCRIPTION_TAG,
    FALLBACK_NAME_TEMPLATE,
    NAME_TAG,
    PLACEMARK_TAG,
)
from pser_kml.activities.parse_kml._normalization import (
    element_text,
    extract_attributes,
    first_child,
    first_descendant,
    parse_coordinates_text,
)
from pser_kml.activities.parse_kml._validation import (
    KmlValidationError,
    find_out_of_range,
    local_name,
)
from pser_kml.models.document import DroppedPlacemark
from pser_kml.models.feature import Feature

if TYPE_CHECKING:
    from lxml.etree import _Element

logger = logging.getLogger("pser_kml.activities.parse_kml")

NO_COORDINATES_REASON = "missing or empty coordinate block"


def parse_placemarks(
    root: _Element,
    *,
    coordinate_policy: str = "skip",
) -> tuple[list[Feature], list[DroppedPlacemark]]:
    """Convert every Placemark under *root* into a Feature, in document order.

    Each placemark is handled independently: one that has no usable
    coordinates, or has a malformed token under the ``reject`` policy, is
    left out and recorded in the returned dropped list without affecting
    the others.

    Returns:
        ``(features, dropped)``.
    """
    features: list[Feature] = []
    dropped: list[DroppedPlacemark] = []

    placemarks = [el for el in root.iter() if local_name(el) == PLACEMARK_TAG]

    for idx, pm in enumerate(placemarks, start=1):
        name = element_text(first_child(pm, NAME_TAG)) or FALLBACK_NAME_TEMPLATE.format(index=idx)
        description = element_text(first_child(pm, DESCRIPTION_TAG))

        try:
            coords = _placemark_coordinates(pm, name, coordinate_policy)
        except KmlValidationError as exc:
            logger.warning("Skipping invalid placemark | index=%d | name=%s | %s", idx, name, exc)
            dropped.append(DroppedPlacemark(index=idx, name=name, reason=exc.message))
            continue

        if not coords:
            logger.debug("Dropping placemark without coordinates | index=%d | name=%s", idx, name)
            dropped.append(DroppedPlacemark(index=idx, name=name, reason=NO_COORDINATES_REASON))
            continue

        features.append(
            Feature(
                name=name,
                description=description,
                coordinates=tuple(coords),
                attributes=extract_attributes(pm),
                raw_markup=_serialise(pm),
            )
        )

    return features, dropped


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _placemark_coordinates(
    pm: _Element, name: str, coordinate_policy: str
) -> list[tuple[float, float]]:
    """Return ``(lat, lon)`` pairs from the placemark's first coordinate block."""
    coords_elem = first_descendant(pm, COORDINATES_TAG)
    text = element_text(coords_elem)
    if not text:
        return []

    coords = parse_coordinates_text(text, policy=coordinate_policy, placemark_name=name)
    out_of_range = find_out_of_range(coords)
    if out_of_range:
        logger.warning(
            "Coordinates outside WGS 84 bounds | name=%s | count=%d | first=%s",
            name,
            len(out_of_range),
            out_of_range[0],
        )
    return coords


def _serialise(pm: _Element) -> str:
    from lxml import etree  # type: ignore[attr-defined]

    return etree.tostring(pm, encoding="unicode", with_tail=False)
