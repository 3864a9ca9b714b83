"""Validation helpers for KML parsing.

Responsibilities:
- Document-level checks (type, emptiness, size)
- XML well-formedness and KML root element (default ``XmlLoader``)
- Coordinate bounds reporting (WGS 84)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pser_kml.activities.parse_kml._constants import (
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
    ROOT_TAG,
)
from pser_kml.core.exceptions import ValidationError

if TYPE_CHECKING:
    from lxml.etree import _Element

logger = logging.getLogger("pser_kml.activities.parse_kml")


# ---------------------------------------------------------------------------
# Exceptions (public API, re-exported from __init__)
# ---------------------------------------------------------------------------


class KmlParseError(ValidationError):
    """Raised when a document cannot be parsed as KML at all."""

    default_stage = "parse_kml"
    default_code = "KML_PARSE_FAILED"


class KmlValidationError(KmlParseError):
    """Raised when a single placemark holds unusable data.

    Caught per placemark by the parser: the placemark is dropped and the
    rest of the document is still returned.
    """

    default_code = "KML_VALIDATION_FAILED"


# ---------------------------------------------------------------------------
# Document checks
# ---------------------------------------------------------------------------


def validate_document_text(text: object, *, max_bytes: int) -> None:
    """Check that *text* is a non-empty string within the size limit.

    Raises:
        KmlParseError: If the document is not text, is blank, or is too large.
    """
    if not isinstance(text, str):
        msg = f"KML document must be text, got {type(text).__name__}"
        raise KmlParseError(msg)

    if not text.strip():
        msg = "KML document is empty"
        raise KmlParseError(msg)

    size = len(text.encode("utf-8"))
    if size > max_bytes:
        msg = f"KML document is {size} bytes, larger than the {max_bytes} byte limit"
        raise KmlParseError(msg, code="KML_DOCUMENT_TOO_LARGE")


def load_xml(text: str) -> _Element:
    """Parse *text* with lxml and return the root ``<kml>`` element.

    This is the default ``XmlLoader``. Entity resolution and network
    access are disabled. The declared encoding is ignored because the
    document has already been decoded to ``str``.

    Raises:
        KmlParseError: If the text is not well-formed XML or the root
            element is not ``<kml>``.
    """
    from lxml import etree  # type: ignore[attr-defined]

    parser = etree.XMLParser(
        resolve_entities=False, no_network=True, huge_tree=False, encoding="utf-8"
    )
    try:
        root = etree.fromstring(text.lstrip().encode("utf-8"), parser=parser)
    except etree.XMLSyntaxError as exc:
        msg = f"Not valid XML: {exc}"
        raise KmlParseError(msg) from exc

    if root is None:
        msg = "Not valid XML: document has no root element"
        raise KmlParseError(msg)

    if local_name(root).lower() != ROOT_TAG:
        msg = f"Not a KML file — root element is <{root.tag}>"
        raise KmlParseError(msg)

    return root


def local_name(elem: _Element) -> str:
    """Return the namespace-free tag of *elem* (``""`` for comments/PIs)."""
    tag = elem.tag
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


# ---------------------------------------------------------------------------
# Coordinate bounds
# ---------------------------------------------------------------------------


def find_out_of_range(coords: list[tuple[float, float]]) -> list[tuple[float, float]]:
    """Return the ``(lat, lon)`` pairs that fall outside WGS 84 bounds.

    Out-of-range pairs are reported, not rejected: the placemark is still
    a feature, most often one whose columns were written ``lat,lon``.
    """
    return [
        (lat, lon)
        for lat, lon in coords
        if not (MIN_LATITUDE <= lat <= MAX_LATITUDE and MIN_LONGITUDE <= lon <= MAX_LONGITUDE)
    ]
