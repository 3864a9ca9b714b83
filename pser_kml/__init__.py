"""PSER KML Analyzer.

Parses uploaded KML annotation files into map features and derives
heuristic project metadata (code, location, type, status) plus a
templated narrative for a selected feature.
"""

__version__ = "0.1.0"
