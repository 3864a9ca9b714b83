"""Data models and schemas.

- Feature: One parsed Placemark (point or path) with attributes
- ParsedDocument: All accepted features plus the dropped-placemark record
- AnalysisResult: Per-feature derived summary (pydantic)
- payloads: Request schemas for the HTTP entry points
"""

from pser_kml.models.analysis import AnalysisResult
from pser_kml.models.document import DroppedPlacemark, ParsedDocument
from pser_kml.models.feature import Feature

__all__ = [
    "AnalysisResult",
    "DroppedPlacemark",
    "Feature",
    "ParsedDocument",
]
