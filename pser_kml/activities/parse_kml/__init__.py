"""KML parsing activity — Document Parser.

Converts uploaded KML text into an ordered sequence of Features: name,
description, ``(lat, lon)`` coordinates and ExtendedData attributes.

The parsing pipeline is split into focused stages:
- **_validation**: document checks, default lxml ``XmlLoader``, WGS 84 bounds report
- **_normalization**: coordinate tokens → ``(lat, lon)``, ExtendedData extraction
- **_lxml_parser**: element-tree walk, one Feature per Placemark

Supported KML structures:
- Point, LineString and Polygon Placemarks (first coordinate block is used)
- Nested Folder/Document hierarchies
- KML 2.2, KML 2.1 and namespace-less documents
- ExtendedData/Data and Schema/SchemaData typed attributes

Failure model:
- The whole document fails with ``KmlParseError`` only when it cannot be
  read as KML at all. This is distinct from a KML with zero features.
- Placemarks are independent: one without coordinates (or with a
  malformed token under the ``reject`` policy) is dropped and recorded in
  ``ParsedDocument.dropped``. Out-of-range coordinates are logged and kept.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from pser_kml.activities.parse_kml._constants import (
    KML_NAMESPACE,
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
)
from pser_kml.activities.parse_kml._lxml_parser import parse_placemarks
from pser_kml.activities.parse_kml._normalization import (
    extract_attributes,
    parse_coordinates_text,
)
from pser_kml.activities.parse_kml._validation import (
    KmlParseError,
    KmlValidationError,
    find_out_of_range,
    load_xml,
    validate_document_text,
)
from pser_kml.core.config import AnalyzerConfig
from pser_kml.models.document import ParsedDocument

if TYPE_CHECKING:
    from lxml.etree import _Element

logger = logging.getLogger("pser_kml.activities.parse_kml")

#: Turns document text into a root element; raises ``KmlParseError`` on bad input.
XmlLoader = Callable[[str], "_Element"]

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "KML_NAMESPACE",
    "MAX_LATITUDE",
    "MAX_LONGITUDE",
    "MIN_LATITUDE",
    "MIN_LONGITUDE",
    "KmlParseError",
    "KmlValidationError",
    "XmlLoader",
    "extract_attributes",
    "find_out_of_range",
    "load_xml",
    "parse_coordinates_text",
    "parse_kml_text",
    "parse_placemarks",
    "validate_document_text",
]


def parse_kml_text(
    text: str,
    *,
    loader: XmlLoader = load_xml,
    config: AnalyzerConfig | None = None,
) -> ParsedDocument:
    """Parse a KML document and extract its features.

    Args:
        text: The uploaded document, already decoded to ``str``.
        loader: XML tokeniser returning the root element. Defaults to lxml.
        config: Size limit and malformed-coordinate policy. Defaults to
            ``AnalyzerConfig()``.

    Returns:
        ``ParsedDocument`` with features in document order, the original
        text, and the placemarks that were dropped.

    Raises:
        KmlParseError: If the text is empty, too large, not well-formed
            XML, or not a KML document.
    """
    config = config or AnalyzerConfig()

    validate_document_text(text, max_bytes=config.max_document_bytes)

    try:
        root = loader(text)
    except KmlParseError:
        raise
    except Exception as exc:
        # Injected loaders may raise their own exception types.
        msg = f"Cannot parse KML document: {exc}"
        raise KmlParseError(msg) from exc

    features, dropped = parse_placemarks(root, coordinate_policy=config.coordinate_policy)

    logger.info(
        "Parsed KML document | features=%d | dropped=%d | bytes=%d",
        len(features),
        len(dropped),
        len(text.encode("utf-8")),
    )
    return ParsedDocument(features=tuple(features), raw_text=text, dropped=tuple(dropped))
