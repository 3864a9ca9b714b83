"""Shared constants for KML parsing."""

from __future__ import annotations

# KML 2.2 namespace (2.1 and namespace-less documents are also accepted)
KML_NAMESPACE = "http://www.opengis.net/kml/2.2"

# WGS 84 coordinate bounds
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0

# Element local names (matched in any namespace)
ROOT_TAG = "kml"
PLACEMARK_TAG = "Placemark"
NAME_TAG = "name"
DESCRIPTION_TAG = "description"
COORDINATES_TAG = "coordinates"
EXTENDED_DATA_TAG = "ExtendedData"
DATA_TAG = "Data"
VALUE_TAG = "value"
SIMPLE_DATA_TAG = "SimpleData"

# Fallback name for a placemark without <name>; index is one-based
FALLBACK_NAME_TEMPLATE = "Feature {index}"

# Malformed coordinate token handling (see AnalyzerConfig.coordinate_policy)
POLICY_SKIP = "skip"
POLICY_REJECT = "reject"
