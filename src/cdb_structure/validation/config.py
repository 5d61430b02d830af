"""Validation configuration constants.

This module centralizes all structural limits and severity rules.

Severity Levels:
    - "error": The repository does not conform to the CDB naming/structure convention
    - "warning": Issues that warrant review but do not break conformance

Violation Kinds:
    - "format": Filename does not match its grammar or fails the separator pre-check
    - "field": A matched field is individually invalid (width, padding, range)
    - "cross_field": A field is invalid given another field (CS2 given CS1 and dataset)
    - "archive_structure": Archive size, container format or compression method
    - "archive_entry": A file inside an archive fails filename validation
    - "io": A file or directory could not be read
"""

from __future__ import annotations

from cdb_structure.core.enums import ViolationKind

# ============================================================================
# STRUCTURAL LIMITS
# ============================================================================

MAX_ARCHIVE_SIZE = 32_000_000  # bytes, inclusive
COMPONENT_SELECTOR_WIDTH = 3
FEATURE_CODE_LENGTH = 5
MAX_MODEL_NAME_LENGTH = 32
MAX_LATITUDE = 90
MAX_LONGITUDE = 180

# Highest numeric LOD (L23); "LC" is the coarsest level
MAX_LOD = 23


# ============================================================================
# EXECUTION
# ============================================================================

# Worker threads for leaf validation; 1 validates inline
DEFAULT_WORKERS = 4


# ============================================================================
# SEVERITY RULES
# ============================================================================

VIOLATION_SEVERITY = {
    ViolationKind.FORMAT: "error",
    ViolationKind.FIELD: "error",
    ViolationKind.CROSS_FIELD: "error",
    ViolationKind.ARCHIVE_STRUCTURE: "error",
    ViolationKind.ARCHIVE_ENTRY: "error",
    ViolationKind.IO: "error",
}


def get_severity(kind: ViolationKind) -> str:
    """Get severity level for a violation kind.

    Args:
        kind: Violation kind.

    Returns:
        Severity level: "error" or "warning".

    Raises:
        ValueError: If kind has no configured severity.

    Examples:
        >>> get_severity(ViolationKind.FIELD)
        'error'
    """
    if kind not in VIOLATION_SEVERITY:
        raise ValueError(f"Unknown violation kind: {kind}")
    return VIOLATION_SEVERITY[kind]
