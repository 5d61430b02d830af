"""Field-level validators for parsed CDB filename fields.

Each validator takes the raw captured text of one field, plus whatever context
it depends on (the dataset code, the LOD, the reference policy), and returns a
list of violations. Validators never raise and never stop at the first problem
of another field: the filename pipeline runs all of them and keeps every
violation.

Violations returned here carry no path; the caller attaches the file path and
entry context.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from cdb_structure.core.enums import ViolationKind
from cdb_structure.reference.policy import ReferencePolicy
from .config import (
    COMPONENT_SELECTOR_WIDTH,
    FEATURE_CODE_LENGTH,
    MAX_LATITUDE,
    MAX_LOD,
    MAX_LONGITUDE,
    MAX_MODEL_NAME_LENGTH,
)
from .models import Violation

LOD_COARSEST = "LC"


def _is_digits(text: str) -> bool:
    return text.isascii() and text.isdigit()


def _field_error(message: str) -> List[Violation]:
    return [Violation(message, kind=ViolationKind.FIELD)]


def _cross_field_error(message: str) -> Violation:
    return Violation(message, kind=ViolationKind.CROSS_FIELD)


# ============================================================================
# TILE LOCATION
# ============================================================================


def _validate_coordinate(raw: str, letters: str, digits: int, limit: int, label: str) -> List[Violation]:
    magnitude = raw[1:]
    if (
        len(raw) == digits + 1
        and raw[0] in letters
        and _is_digits(magnitude)
        and int(magnitude) <= limit
    ):
        return []
    return _field_error(f"Invalid {label} ({raw})")


def validate_latitude(raw: str) -> List[Violation]:
    """Validate a latitude code: N or S followed by two digits in [0, 90].

    Examples:
        >>> validate_latitude("N62")
        []
        >>> [v.message for v in validate_latitude("N99")]
        ['Invalid latitude (N99)']
    """
    return _validate_coordinate(raw, "NS", 2, MAX_LATITUDE, "latitude")


def validate_longitude(raw: str) -> List[Violation]:
    """Validate a longitude code: E or W followed by three digits in [0, 180]."""
    return _validate_coordinate(raw, "EW", 3, MAX_LONGITUDE, "longitude")


# ============================================================================
# DATASET CODE & COMPONENT SELECTORS
# ============================================================================


def dataset_code_text(raw: str) -> str:
    """Strip the "D" prefix some grammars capture with the dataset code."""
    return raw[1:] if raw.startswith("D") else raw


def validate_dataset_code(raw: str, policy: ReferencePolicy) -> List[Violation]:
    """Validate a dataset code against the reference policy.

    The literal code is echoed so "000" stays "000" in the message.
    """
    code = dataset_code_text(raw)
    if _is_digits(code) and policy.is_valid_code(int(code)):
        return []
    return _field_error(f"Invalid code {code}")


def validate_padded_number(
    raw: str, label: str, width: int = COMPONENT_SELECTOR_WIDTH
) -> List[Violation]:
    """Validate a fixed-width, zero-padded, non-negative integer field.

    The field is valid iff it equals its integer value zero-padded to
    ``width`` (e.g. "007", "042", "306"). At most one violation is returned:

    - non-digit or empty text is a number format error,
    - a value that cannot fit in ``width`` digits is out of range,
    - any other text that is not the padded value is a padding error
      ("42", "0042").

    Examples:
        >>> validate_padded_number("042", "Component Selector 1")
        []
        >>> [v.message for v in validate_padded_number("42", "Component Selector 1")]
        ['Invalid padding on Component Selector 1 (42)']
    """
    if not _is_digits(raw):
        return _field_error(f"Invalid {label} number format ({raw})")
    value = int(raw)
    if value >= 10**width:
        return _field_error(f"{label} out of range ({raw})")
    if raw != str(value).zfill(width):
        return _field_error(f"Invalid padding on {label} ({raw})")
    return []


def validate_component_selectors(
    cs1: str, cs2: str, dataset: str, policy: ReferencePolicy
) -> List[Violation]:
    """Validate CS1/CS2 format, then their meaning for the dataset.

    CS1 must be valid for the dataset and CS2 must be valid for the pair
    (dataset, CS1). A dataset, or a CS1, that the policy does not know has no
    valid selectors. Semantic checks only run on well-formatted selectors.

    Args:
        cs1: Raw Component Selector 1 text.
        cs2: Raw Component Selector 2 text.
        dataset: Dataset code digits as written in the name ("306").
        policy: Reference policy to query.
    """
    cs1_format = validate_padded_number(cs1, "Component Selector 1")
    cs2_format = validate_padded_number(cs2, "Component Selector 2")
    violations = cs1_format + cs2_format

    code: Optional[int] = int(dataset) if _is_digits(dataset) else None
    if not cs1_format:
        if code is None or not policy.is_valid_cs1(code, cs1):
            violations.append(
                _cross_field_error(f"Invalid Component Selector 1 ({cs1}) for Dataset ({dataset})")
            )
        if not cs2_format and (code is None or not policy.is_valid_cs2(code, cs1, cs2)):
            violations.append(
                _cross_field_error(
                    f"Invalid Component Selector 2 ({cs2}) for CS1 ({cs1}) and Dataset ({dataset})"
                )
            )
    return violations


# ============================================================================
# LEVEL OF DETAIL & SUB-TILE REFERENCES
# ============================================================================


def validate_lod(raw: str) -> List[Violation]:
    """Validate a LOD token: "LC" or "L" followed by two digits up to L23."""
    if raw == LOD_COARSEST:
        return []
    if len(raw) == 3 and raw[0] == "L" and _is_digits(raw[1:]) and int(raw[1:]) <= MAX_LOD:
        return []
    return _field_error(f"Invalid LOD name: {raw}")


def reference_bound(lod: str) -> int:
    """Return the largest valid UREF/RREF for a LOD.

    LC always maps to a single tile; numeric LODs index a grid that doubles
    per level, so Ln allows references 0 to 2**n - 1.

    Raises:
        ValueError: If ``lod`` is not a valid LOD token.

    Examples:
        >>> reference_bound("LC")
        0
        >>> reference_bound("L07")
        127
    """
    if validate_lod(lod):
        raise ValueError(f"Invalid LOD name: {lod}")
    if lod == LOD_COARSEST:
        return 0
    return 2 ** int(lod[1:]) - 1


def _validate_reference(raw: str, lod: str, label: str, out_of_bounds: str) -> List[Violation]:
    if validate_lod(lod):
        # Bounds are undefined; the LOD violation is reported on its own
        return []
    if not _is_digits(raw):
        return _field_error(f"Invalid {label} number format ({raw})")
    if raw != str(int(raw)):
        return _field_error(f"Invalid padding on {label} ({raw})")
    bound = reference_bound(lod)
    if int(raw) > bound:
        return [_cross_field_error(f"{out_of_bounds}: {raw} (max {bound} at {lod})")]
    return []


def validate_uref(raw: str, lod: str) -> List[Violation]:
    """Validate a UREF (row reference) against the bound implied by the LOD."""
    return _validate_reference(raw, lod, "UREF", "UREF value out of bounds")


def validate_rref(raw: str, lod: str) -> List[Violation]:
    """Validate an RREF (column reference) against the bound implied by the LOD."""
    return _validate_reference(raw, lod, "RREF", "RREF out of bounds for LOD")


# ============================================================================
# MODEL NAMING & EXTENSIONS
# ============================================================================


def validate_feature_code(raw: str, width: int = FEATURE_CODE_LENGTH) -> List[Violation]:
    if len(raw) != width:
        return _field_error(f"Feature Code should be {width} characters ({raw})")
    return []


def validate_name_length(
    raw: str, label: str, max_length: int = MAX_MODEL_NAME_LENGTH
) -> List[Violation]:
    if len(raw) > max_length:
        return _field_error(f"{label} should not exceed {max_length} characters ({raw})")
    return []


def validate_extension(raw: str, allowed: Sequence[str], role: str = "file") -> List[Violation]:
    """Exact-match the extension against the allow-list.

    ``role`` is "archive" for containers and "file" for payload files.
    """
    if raw in allowed:
        return []
    return _field_error(f"Invalid {role} extension: {raw}")


__all__ = [
    "LOD_COARSEST",
    "dataset_code_text",
    "reference_bound",
    "validate_component_selectors",
    "validate_dataset_code",
    "validate_extension",
    "validate_feature_code",
    "validate_latitude",
    "validate_lod",
    "validate_longitude",
    "validate_name_length",
    "validate_padded_number",
    "validate_rref",
    "validate_uref",
]
