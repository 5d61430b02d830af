"""Core enumerations used across the package."""

from __future__ import annotations

from enum import Enum


class DatasetFamily(str, Enum):
    """Top-level CDB directory families.

    Values are the directory names under the CDB root, which also eases
    CLI interchange.
    """

    TILES = "Tiles"
    GTMODEL = "GTModel"
    MMODEL = "MModel"
    NAVIGATION = "Navigation"


class ViolationKind(str, Enum):
    """Classification of a structural violation."""

    FORMAT = "format"
    FIELD = "field"
    CROSS_FIELD = "cross_field"
    ARCHIVE_STRUCTURE = "archive_structure"
    ARCHIVE_ENTRY = "archive_entry"
    IO = "io"


class FieldKind(str, Enum):
    """Semantic kind of a named filename field.

    The kind selects the field validator applied to the captured text.
    """

    LATITUDE = "latitude"
    LONGITUDE = "longitude"
    DATASET_CODE = "dataset_code"
    CS1 = "cs1"
    CS2 = "cs2"
    LOD = "lod"
    UREF = "uref"
    RREF = "rref"
    FEATURE_CODE = "feature_code"
    FEATURE_SUB_CODE = "feature_sub_code"
    MODEL_NAME = "model_name"
    TEXTURE_NAME = "texture_name"
    EXTENSION = "extension"


__all__ = ["DatasetFamily", "ViolationKind", "FieldKind"]
