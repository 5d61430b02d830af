"""Tests for the validation configuration functions and constants.

This module verifies that `get_severity` from `cdb_structure.validation.config`
returns expected values and handles invalid inputs. It also includes a meta-test
to ensure every violation kind is present in the severity map.
"""

import pytest

from cdb_structure.core.enums import ViolationKind
from cdb_structure.validation.config import (
    MAX_ARCHIVE_SIZE,
    MAX_LOD,
    VIOLATION_SEVERITY,
    get_severity,
)


def test_structural_limits():
    assert MAX_ARCHIVE_SIZE == 32_000_000
    assert MAX_LOD == 23


def test_get_severity_valid():
    """Every structural violation breaks conformance."""
    assert get_severity(ViolationKind.FORMAT) == "error"
    assert get_severity(ViolationKind.CROSS_FIELD) == "error"
    assert get_severity(ViolationKind.ARCHIVE_ENTRY) == "error"
    assert get_severity(ViolationKind.IO) == "error"


def test_get_severity_invalid_kind():
    """Test that get_severity() raises ValueError for unknown kinds."""
    with pytest.raises(ValueError, match="Unknown violation kind"):
        get_severity("nonexistent_kind")


def test_all_kinds_in_severity_map():
    """Meta-test: ensure every ViolationKind has a severity."""
    assert set(VIOLATION_SEVERITY) == set(ViolationKind)
    assert set(VIOLATION_SEVERITY.values()) <= {"error", "warning"}
