"""Candidate keys, sentinels and keyword rules for feature analysis.

Candidate tuples are ranked: earlier entries win over later ones,
whatever order the attributes appear in.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Attribute key candidates
# ---------------------------------------------------------------------------

# Exact (case-insensitive) key match
PROJECT_CODE_KEYS = (
    "code",
    "project_code",
    "projectcode",
    "id",
    "project_id",
    "projectid",
    "pser_code",
)
PROJECT_TYPE_KEYS = ("type", "project_type", "projecttype", "category", "work_type")

# Substring (case-insensitive) key match
LOCATION_KEYS = ("location", "address", "site", "area", "barangay", "municipality")
STATUS_KEYS = ("status", "project_status", "state", "phase")

# First match in the feature name: "ABC-123", "PSER-123" or a 4+ digit run
PROJECT_CODE_NAME_PATTERN = r"[A-Z]{2,}-\d+|PSER-\d+|\d{4,}"

# ---------------------------------------------------------------------------
# Sentinels
# ---------------------------------------------------------------------------

NO_PROJECT_CODE = "N/A"
NO_LOCATION = "Location not specified"
NO_STATUS = "Status not specified"
NO_DESCRIPTION = "No description provided"
LINEAR_INFRASTRUCTURE = "Linear infrastructure (Power line, Road, Pipeline, etc.)"
POINT_INFRASTRUCTURE = "Point infrastructure"

COORDINATE_DECIMALS = 6

# ---------------------------------------------------------------------------
# Interpretation
# ---------------------------------------------------------------------------

PROJECT_LABEL = "PSER (Power Sector Engineering Resources)"

# Evaluated top to bottom against the lower-cased description; first hit only.
KEYWORD_SENTENCES: tuple[tuple[str, str], ...] = (
    ("transmission", "This appears to be a transmission line project."),
    ("distribution", "This appears to be a distribution line project."),
    ("substation", "This appears to be a substation project."),
    ("tower", "This appears to involve transmission towers."),
)
