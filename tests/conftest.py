"""Shared pytest fixtures for the PSER KML Analyzer test suite."""

from pathlib import Path

import pytest

from pser_kml.models.feature import Feature

# ---------------------------------------------------------------------------
# Path fixtures
# ---------------------------------------------------------------------------

TESTS_DIR = Path(__file__).parent
DATA_DIR = TESTS_DIR / "data"


@pytest.fixture()
def data_dir() -> Path:
    """Return the path to the test data directory."""
    return DATA_DIR


# ---------------------------------------------------------------------------
# Sample KML text fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mixed_features_kml() -> str:
    """Line with Data attributes, point with SimpleData, unnamed point."""
    return (DATA_DIR / "01_pser_mixed_features.kml").read_text(encoding="utf-8")


@pytest.fixture()
def nested_folders_kml() -> str:
    """Two points inside nested Folders plus a top-level polygon."""
    return (DATA_DIR / "02_nested_folders.kml").read_text(encoding="utf-8")


@pytest.fixture()
def missing_coordinates_kml() -> str:
    """Four placemarks, two of which have no usable coordinates."""
    return (DATA_DIR / "03_missing_coordinates.kml").read_text(encoding="utf-8")


@pytest.fixture()
def no_namespace_kml() -> str:
    """KML without a namespace declaration and a repeated attribute key."""
    return (DATA_DIR / "04_no_namespace.kml").read_text(encoding="utf-8")


@pytest.fixture()
def not_xml_kml() -> str:
    """Text that is not XML at all."""
    return (DATA_DIR / "05_malformed_not_xml.kml").read_text(encoding="utf-8")


@pytest.fixture()
def empty_kml() -> str:
    """Valid KML with no placemarks."""
    return (DATA_DIR / "06_empty_document.kml").read_text(encoding="utf-8")


@pytest.fixture()
def malformed_tokens_kml() -> str:
    """A line with malformed coordinate tokens and a clean point."""
    return (DATA_DIR / "07_malformed_tokens.kml").read_text(encoding="utf-8")


@pytest.fixture()
def out_of_range_kml() -> str:
    """A placemark with latitude outside WGS 84 bounds and a valid one."""
    return (DATA_DIR / "08_out_of_range.kml").read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Feature fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def point_feature() -> Feature:
    """A single-point feature with no attributes."""
    return Feature(name="Pole 17", coordinates=((14.5995, 120.9842),))


@pytest.fixture()
def line_feature() -> Feature:
    """A three-point transmission line with attributes."""
    return Feature(
        name="Line ABC-4567 Sector",
        description="Transmission Line Upgrade with new tower foundations",
        coordinates=((14.5995, 120.9842), (14.6760, 121.0244), (14.6760, 121.0437)),
        attributes={"Project_Status": "Ongoing", "Municipality": "Quezon City"},
    )
