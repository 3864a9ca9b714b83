"""Data model for a parsed KML feature.

A Feature represents a single Placemark extracted from a KML document:
a point or a path, with its name, description and any ExtendedData
attributes. It is the output of the parse_kml activity and the input
to the analyze_feature activity.
"""

from __future__ import annotations

from dataclasses import dataclass, field

_MARKUP_KEY = "rawMarkup"

# Keys the browser client historically sent for the same fields.
_LEGACY_ATTRIBUTE_KEY = "extendedData"
_LEGACY_MARKUP_KEY = "rawXml"


@dataclass(frozen=True, slots=True)
class Feature:
    """A single geographic feature extracted from a KML document.

    Attributes:
        name: Placemark name (e.g. ``"Line ABC-4567 Sector"``).
        description: Placemark description text, may be empty.
        coordinates: Ordered ``(lat, lon)`` pairs. Note the order is the
            reverse of KML's ``lon,lat`` tokens.
        attributes: Key-value pairs from ``ExtendedData`` elements.
        raw_markup: Serialised ``<Placemark>`` fragment, kept for re-analysis.
    """

    name: str
    description: str = ""
    coordinates: tuple[tuple[float, float], ...] = ()
    attributes: dict[str, str] = field(default_factory=dict)
    raw_markup: str = ""

    def to_dict(self) -> dict[str, object]:
        """Serialise to a JSON-compatible dict with camelCase wire keys."""
        return {
            "name": self.name,
            "description": self.description,
            "coordinates": [list(c) for c in self.coordinates],
            "attributes": dict(self.attributes),
            _MARKUP_KEY: self.raw_markup,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> Feature:
        """Deserialise from a JSON payload.

        Missing text fields are defaulted (an absent ``name`` becomes
        ``""``). The legacy keys ``extendedData`` and ``rawXml`` are
        accepted in place of ``attributes`` and ``rawMarkup``.

        Raises:
            ValueError: If ``coordinates`` is missing or empty.
            TypeError: If field values have unexpected types.
        """
        if "coordinates" not in data or data["coordinates"] is None:
            msg = "coordinates is missing"
            raise ValueError(msg)
        coords_raw = data["coordinates"]
        if not isinstance(coords_raw, list | tuple):
            msg = f"coordinates must be a list, got {type(coords_raw).__name__}"
            raise TypeError(msg)
        if not coords_raw:
            msg = "coordinates is empty"
            raise ValueError(msg)
        coordinates = tuple(_coerce_pair(idx, c) for idx, c in enumerate(coords_raw))

        attributes_raw = data.get("attributes", data.get(_LEGACY_ATTRIBUTE_KEY)) or {}
        if not isinstance(attributes_raw, dict):
            msg = f"attributes must be a dict, got {type(attributes_raw).__name__}"
            raise TypeError(msg)

        name = data.get("name")
        description = data.get("description")
        raw_markup = data.get(_MARKUP_KEY, data.get(_LEGACY_MARKUP_KEY))

        return cls(
            name="" if name is None else str(name),
            description="" if description is None else str(description),
            coordinates=coordinates,
            attributes={
                str(k): "" if v is None else str(v) for k, v in attributes_raw.items()
            },
            raw_markup="" if raw_markup is None else str(raw_markup),
        )

    @property
    def is_linear(self) -> bool:
        """Whether the feature spans more than one coordinate pair."""
        return len(self.coordinates) > 1


def _coerce_pair(idx: int, raw: object) -> tuple[float, float]:
    """Convert one ``[lat, lon]`` wire entry to a float tuple."""
    if not isinstance(raw, list | tuple) or len(raw) < 2:
        msg = f"coordinate at index {idx} must be a [lat, lon] pair, got {raw!r}"
        raise TypeError(msg)
    lat, lon = raw[0], raw[1]
    if isinstance(lat, bool) or isinstance(lon, bool):
        msg = f"coordinate at index {idx} is not numeric: {raw!r}"
        raise TypeError(msg)
    try:
        return (float(lat), float(lon))  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        msg = f"coordinate at index {idx} is not numeric: {raw!r}"
        raise TypeError(msg) from exc
