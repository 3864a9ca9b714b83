"""Data model for a parsed KML document.

Holds every feature the parser accepted, in document order, together
with the original text (re-used as analysis context) and a record of
the placemarks that were excluded.
"""

from __future__ import annotations

from dataclasses import dataclass

from pser_kml.models.feature import Feature


@dataclass(frozen=True, slots=True)
class DroppedPlacemark:
    """A placemark the parser excluded from its output.

    Attributes:
        index: One-based position of the placemark in the document.
        name: Resolved placemark name (or its ``Feature {n}`` fallback).
        reason: Why it was excluded.
    """

    index: int
    name: str
    reason: str

    def to_dict(self) -> dict[str, object]:
        return {"index": self.index, "name": self.name, "reason": self.reason}


@dataclass(frozen=True, slots=True)
class ParsedDocument:
    """Output of ``parse_kml_text``.

    Attributes:
        features: Accepted features in document order.
        raw_text: The document text exactly as received.
        dropped: Placemarks excluded from ``features``.
    """

    features: tuple[Feature, ...] = ()
    raw_text: str = ""
    dropped: tuple[DroppedPlacemark, ...] = ()

    @property
    def dropped_count(self) -> int:
        """Number of placemarks excluded from ``features``."""
        return len(self.dropped)

    def bounds(self) -> tuple[tuple[float, float], tuple[float, float]] | None:
        """Return ``((min_lat, min_lon), (max_lat, max_lon))`` over all features.

        Returns ``None`` when the document has no features.
        """
        points = [pair for feature in self.features for pair in feature.coordinates]
        if not points:
            return None

        from shapely.geometry import MultiPoint

        # Pairs are (lat, lon), so shapely's x is latitude here.
        min_lat, min_lon, max_lat, max_lon = MultiPoint(points).bounds
        return ((min_lat, min_lon), (max_lat, max_lon))

    def to_dict(self) -> dict[str, object]:
        """Serialise to the parse endpoint's JSON response body."""
        bounds = self.bounds()
        return {
            "features": [f.to_dict() for f in self.features],
            "rawXml": self.raw_text,
            "droppedCount": self.dropped_count,
            "dropped": [d.to_dict() for d in self.dropped],
            "bounds": [list(corner) for corner in bounds] if bounds else None,
        }
