"""Filename grammars and directory layouts for CDB datasets.

This module is the grammar registry: an immutable table from dataset code to
the filename pattern that every file of that dataset must match, plus the
directory layout the tree walker follows to reach those files.

Grammars are data, not behavior. Each one is a compiled pattern with named
groups and a declared list of fields (name, kind, width rules) consumed by
the generic field validators in ``cdb_structure.validation.fields``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Pattern, Tuple

from .enums import DatasetFamily, FieldKind


@dataclass(frozen=True)
class FieldSpec:
    """Declaration of one named group of a filename grammar.

    Attributes:
        name: Regex group name (e.g. "cs1", "feature_code").
        kind: Semantic kind, selects the validator.
        label: Human-readable name used in violation messages.
        width: Exact width for fixed-width fields (component selectors, FSC,
            feature code).
        max_length: Maximum length for free-text fields (model names).
    """

    name: str
    kind: FieldKind
    label: str = ""
    width: Optional[int] = None
    max_length: Optional[int] = None


@dataclass(frozen=True)
class FilenameGrammar:
    """A compiled filename pattern with its field declarations.

    Attributes:
        key: Registry key (e.g. "500", "tiles:306", "entry:306").
        pattern: Compiled pattern; a name is valid only on a full match.
        fields: Field declarations, validated in this order.
        extensions: Exact-match allow-list for the ``ext`` field.
        separators: Expected underscore count for the structural pre-check,
            or None when the grammar has free-text segments.
        dataset_code: Dataset code fixed by the grammar literal (e.g. D500),
            None when the code is captured from the name.
        extension_role: "archive" or "file"; selects the extension message.
        example: A valid filename, used in listings and docs.
    """

    key: str
    pattern: Pattern[str]
    fields: Tuple[FieldSpec, ...]
    extensions: Tuple[str, ...]
    separators: Optional[int] = None
    dataset_code: Optional[int] = None
    extension_role: str = "file"
    example: str = ""

    def match(self, filename: str) -> Optional[Mapping[str, str]]:
        """Return the parsed fields of ``filename``, or None when it does not match.

        Optional groups that did not participate are left out of the mapping.
        """
        m = self.pattern.fullmatch(filename)
        if m is None:
            return None
        return MappingProxyType({k: v for k, v in m.groupdict().items() if v is not None})


@dataclass(frozen=True)
class DatasetLayout:
    """Expected directory nesting for one dataset.

    Attributes:
        code: Numeric dataset code.
        name: Dataset name, used for the dataset directory ("500_GTModelGeometry").
        family: Top-level family directory.
        roles: Node roles between the dataset directory and the leaf files.
        grammar: Grammar every leaf filename must match.
        leaf: "file" for direct payload files, "archive" for ZIP containers.
        entry_grammar: Grammar for entries inside archives (archive leaves only).
    """

    code: int
    name: str
    family: DatasetFamily
    roles: Tuple[str, ...]
    grammar: FilenameGrammar
    leaf: str = "file"
    entry_grammar: Optional[FilenameGrammar] = None

    @property
    def directory_name(self) -> str:
        return f"{self.code:03d}_{self.name}"


# ============================================================================
# FIELD DECLARATIONS
# ============================================================================

CS1 = FieldSpec("cs1", FieldKind.CS1, "Component Selector 1", width=3)
CS2 = FieldSpec("cs2", FieldKind.CS2, "Component Selector 2", width=3)
LOD = FieldSpec("lod", FieldKind.LOD, "LOD")
FEATURE_CODE = FieldSpec("feature_code", FieldKind.FEATURE_CODE, "Feature Code", width=5)
FSC = FieldSpec("fsc", FieldKind.FEATURE_SUB_CODE, "Feature Sub-Code", width=3)
MODEL_NAME = FieldSpec("model_name", FieldKind.MODEL_NAME, "Model name", max_length=32)
TEXTURE_NAME = FieldSpec("texture_name", FieldKind.TEXTURE_NAME, "Texture name", max_length=32)
EXT = FieldSpec("ext", FieldKind.EXTENSION, "extension")
DATASET = FieldSpec("dataset_code", FieldKind.DATASET_CODE, "Dataset code")
LATITUDE = FieldSpec("lat", FieldKind.LATITUDE, "latitude")
LONGITUDE = FieldSpec("lon", FieldKind.LONGITUDE, "longitude")
UREF = FieldSpec("uref", FieldKind.UREF, "UREF")
RREF = FieldSpec("rref", FieldKind.RREF, "RREF")

_MODEL_FIELDS = (FEATURE_CODE, FSC, MODEL_NAME)

# Shared fragments (ASCII digits only)
_SELECTORS = r"_S(?P<cs1>\d+)_T(?P<cs2>\d+)"
_LOD = r"(?P<lod>LC|L\d{2})"
_MODEL = r"(?P<feature_code>.{5})_(?P<fsc>\d+)_(?P<model_name>[^.]+)"
_EXT = r"\.(?P<ext>.+)"
_TILE_PREFIX = (
    r"(?P<lat>[SN][0-9]{2})(?P<lon>[EW][0-9]{3})_D(?P<dataset_code>[0-9]{3})"
    r"_S(?P<cs1>[0-9]{3})_T(?P<cs2>[0-9]{3})_(?P<lod>LC|L[0-9]{2})_U(?P<uref>[0-9]+)_R(?P<rref>[0-9]+)"
)
_TILE_FIELDS = (LATITUDE, LONGITUDE, DATASET, CS1, CS2, LOD, UREF, RREF)


def _compile(regex: str) -> Pattern[str]:
    return re.compile(regex, re.ASCII)


def _gtmodel_model(code: int, *, lod: bool, ext: str, example: str) -> FilenameGrammar:
    """Grammar for GTModel datasets named by feature code, FSC and model name."""
    lod_part = f"_{_LOD}" if lod else ""
    return FilenameGrammar(
        key=str(code),
        pattern=_compile(f"D{code}{_SELECTORS}{lod_part}_{_MODEL}{_EXT}"),
        fields=(CS1, CS2) + ((LOD,) if lod else ()) + _MODEL_FIELDS + (EXT,),
        extensions=(ext,),
        separators=6 if lod else 5,
        dataset_code=code,
        example=example,
    )


def _gtmodel_texture(code: int, *, lod: bool, ext: str, example: str) -> FilenameGrammar:
    """Grammar for GTModel datasets named by a free texture/material name."""
    lod_part = f"_{_LOD}" if lod else ""
    return FilenameGrammar(
        key=str(code),
        pattern=_compile(f"D{code}{_SELECTORS}{lod_part}_(?P<texture_name>[^.]+){_EXT}"),
        fields=(CS1, CS2) + ((LOD,) if lod else ()) + (TEXTURE_NAME, EXT),
        extensions=(ext,),
        dataset_code=code,
        example=example,
    )


def _tile(key: str, extensions: Tuple[str, ...], role: str, example: str) -> FilenameGrammar:
    return FilenameGrammar(
        key=key,
        pattern=_compile(_TILE_PREFIX + _EXT),
        fields=_TILE_FIELDS + (EXT,),
        extensions=extensions,
        separators=6,
        extension_role=role,
        example=example,
    )


def _tile_entry(code: int, *, model: bool, ext: str, example: str) -> FilenameGrammar:
    """Grammar for entries inside a GSModel tile archive."""
    if model:
        suffix, fields, separators = f"_{_MODEL}", _MODEL_FIELDS, 9
    else:
        suffix, fields, separators = r"_(?P<texture_name>[^.]+)", (TEXTURE_NAME,), None
    return FilenameGrammar(
        key=f"entry:{code}",
        pattern=_compile(_TILE_PREFIX + suffix + _EXT),
        fields=_TILE_FIELDS + fields + (EXT,),
        extensions=(ext,),
        separators=separators,
        extension_role="archive",
        example=example,
    )


# ============================================================================
# GRAMMAR REGISTRY
# ============================================================================

_GTMODEL_GRAMMARS = [
    _gtmodel_model(500, lod=False, ext="flt", example="D500_S001_T001_AL015_001_Castle.flt"),
    _gtmodel_model(503, lod=False, ext="xml", example="D503_S001_T001_AL015_001_Castle.xml"),
    _gtmodel_texture(504, lod=True, ext="tif", example="D504_S001_T001_L10_AC_1.tif"),
    _gtmodel_texture(505, lod=False, ext="xml", example="D505_S001_T001_AC1.xml"),
    _gtmodel_model(506, lod=True, ext="flt", example="D506_S001_T001_L03_AL015_004_Castle.flt"),
    _gtmodel_texture(507, lod=True, ext="rgb", example="D507_S001_T001_L10_AC_1.rgb"),
    _gtmodel_model(508, lod=False, ext="xml", example="D508_S001_T001_AL015_001_Castle.xml"),
    _gtmodel_texture(509, lod=True, ext="tif", example="D509_S001_T001_L10_AC_1.tif"),
    _gtmodel_model(510, lod=True, ext="flt", example="D510_S001_T001_L10_AL015_001_Castle.flt"),
    _gtmodel_texture(511, lod=True, ext="rgb", example="D511_S001_T001_L10_AC_1.rgb"),
    _gtmodel_model(512, lod=True, ext="flt", example="D512_S001_T001_L10_AL015_001_Castle.flt"),
]

_MMDC = (
    r"(?P<mmdc>(?P<kind>\d+)_(?P<domain>\d+)_(?P<country>\d+)_(?P<category>\d+)_\d+_\d+_\d+)"
)

_MMODEL_GRAMMARS = [
    FilenameGrammar(
        key="600",
        pattern=_compile(f"D(?P<dataset_code>600|603){_SELECTORS}_{_MMDC}{_EXT}"),
        fields=(DATASET, CS1, CS2, EXT),
        extensions=("flt", "xml"),
        separators=9,
        example="D600_S001_T001_1_1_225_1_1_8_0.flt",
    ),
    FilenameGrammar(
        key="601",
        pattern=_compile(
            f"D(?P<dataset_code>601|604|605){_SELECTORS}(_W(?P<tsc>\\d{{2}}))?"
            f"_(?P<texture_name>[^.]+){_EXT}"
        ),
        fields=(DATASET, CS1, CS2, TEXTURE_NAME, EXT),
        extensions=("rgb", "tif", "xml"),
        example="D601_S005_T001_W10_M1A2_SEP.rgb",
    ),
    FilenameGrammar(
        key="606",
        pattern=_compile(f"D606{_SELECTORS}_{_LOD}_{_MMDC}{_EXT}"),
        fields=(CS1, CS2, LOD, EXT),
        extensions=("shp", "shx", "dbf"),
        separators=10,
        dataset_code=606,
        example="D606_S001_T001_LC_0_0_0_0_0_0_0.shp",
    ),
]

_NAVIGATION_GRAMMAR = FilenameGrammar(
    key="400",
    pattern=_compile(f"(?P<dataset_code>[^_]+){_SELECTORS}{_EXT}"),
    fields=(DATASET, CS1, CS2, EXT),
    extensions=("dbf",),
    separators=2,
    example="D400_S001_T002.dbf",
)

# Tile datasets: code -> (name, allowed payload extensions)
_TILE_DATASETS: Dict[int, Tuple[str, Tuple[str, ...]]] = {
    1: ("Elevation", ("tif",)),
    2: ("MinMaxElevation", ("tif",)),
    3: ("MaxCulture", ("tif",)),
    4: ("Imagery", ("jp2",)),
    5: ("RMTexture", ("tif",)),
    6: ("RMDescriptor", ("xml",)),
    100: ("GSFeature", ("shp", "shx", "dbf", "dbt")),
    101: ("GTFeature", ("shp", "shx", "dbf", "dbt")),
    102: ("GeoPolitical", ("shp", "shx", "dbf", "dbt")),
    103: ("VectorMaterial", ("shp", "shx", "dbf", "dbt")),
    104: ("RoadNetwork", ("shp", "shx", "dbf", "dbt")),
    105: ("RailRoadNetwork", ("shp", "shx", "dbf", "dbt")),
    106: ("PowerLineNetwork", ("shp", "shx", "dbf", "dbt")),
    107: ("HydrographyNetwork", ("shp", "shx", "dbf", "dbt")),
}

# GSModel datasets: code -> (name, entries named by model?, entry extension)
_GSMODEL_DATASETS: Dict[int, Tuple[str, bool, str]] = {
    300: ("GSModelGeometry", True, "flt"),
    301: ("GSModelTexture", False, "rgb"),
    302: ("GSModelSignature", True, "flt"),
    303: ("GSModelDescriptor", True, "xml"),
    304: ("GSModelMaterial", False, "tif"),
    305: ("GSModelInteriorGeometry", True, "flt"),
    306: ("GSModelInteriorTexture", False, "rgb"),
    307: ("GSModelInteriorDescriptor", True, "xml"),
    308: ("GSModelInteriorMaterial", False, "tif"),
    309: ("GSModelCMT", False, "xml"),
}


def _build_registry() -> Mapping[str, FilenameGrammar]:
    grammars: Dict[str, FilenameGrammar] = {}
    for g in _GTMODEL_GRAMMARS + _MMODEL_GRAMMARS + [_NAVIGATION_GRAMMAR]:
        grammars[g.key] = g
    # Alternation grammars are reachable from every code they accept
    grammars["401"] = grammars["400"]
    grammars["603"] = grammars["600"]
    for code in ("604", "605"):
        grammars[code] = grammars["601"]
    for code, (_, exts) in _TILE_DATASETS.items():
        key = f"{code:03d}"
        grammars[key] = _tile(
            key, exts, "file", f"N62W162_D{key}_S001_T001_L07_U38_R102.{exts[0]}"
        )
    for code, (_, model, ext) in _GSMODEL_DATASETS.items():
        key = f"{code:03d}"
        grammars[key] = _tile(key, ("zip",), "archive", f"N62W162_D{key}_S001_T001_L07_U38_R102.zip")
        suffix = "AL015_001_AcmeFactory" if model else "AcmeFactoryWall"
        grammars[f"entry:{key}"] = _tile_entry(
            code,
            model=model,
            ext=ext,
            example=f"N62W162_D{key}_S001_T001_L07_U38_R102_{suffix}.{ext}",
        )
    return MappingProxyType(grammars)


GRAMMARS: Mapping[str, FilenameGrammar] = _build_registry()


def _registry_key(dataset_code) -> str:
    if isinstance(dataset_code, int):
        return f"{dataset_code:03d}"
    text = str(dataset_code).strip()
    if text.upper().startswith("D"):
        text = text[1:]
    return f"{int(text):03d}" if text.isdigit() else text


def grammar_for(dataset_code) -> FilenameGrammar:
    """Look up the filename grammar for a dataset code.

    Args:
        dataset_code: Numeric code (306), zero-padded text ("306", "001") or
            the "D"-prefixed literal ("D306").

    Returns:
        The registered FilenameGrammar.

    Raises:
        KeyError: If no grammar is registered for the code.

    Examples:
        >>> grammar_for(500).separators
        5
        >>> grammar_for("D306").extensions
        ('zip',)
    """
    key = _registry_key(dataset_code)
    if key not in GRAMMARS:
        raise KeyError(f"No filename grammar registered for dataset {dataset_code}")
    return GRAMMARS[key]


def entry_grammar_for(dataset_code) -> FilenameGrammar:
    """Look up the archive-entry grammar for a GSModel dataset code.

    Raises:
        KeyError: If the dataset does not store its files in archives.
    """
    key = f"entry:{_registry_key(dataset_code)}"
    if key not in GRAMMARS:
        raise KeyError(f"Dataset {dataset_code} has no archive entry grammar")
    return GRAMMARS[key]


# ============================================================================
# DIRECTORY LAYOUTS
# ============================================================================

_TILE_ROLES = ("lod", "uref")
_GTMODEL_ROLES = ("category", "subcategory", "feature_type")


def _build_layouts() -> Tuple[DatasetLayout, ...]:
    layouts: List[DatasetLayout] = []
    for code, (name, _) in _TILE_DATASETS.items():
        layouts.append(
            DatasetLayout(code, name, DatasetFamily.TILES, _TILE_ROLES, grammar_for(code))
        )
    for code, (name, _, _) in _GSMODEL_DATASETS.items():
        layouts.append(
            DatasetLayout(
                code,
                name,
                DatasetFamily.TILES,
                _TILE_ROLES,
                grammar_for(code),
                leaf="archive",
                entry_grammar=entry_grammar_for(code),
            )
        )
    gtmodel = [
        (500, "GTModelGeometry", _GTMODEL_ROLES),
        (503, "GTModelDescriptor", _GTMODEL_ROLES),
        (506, "GTModelInteriorGeometry", _GTMODEL_ROLES + ("lod",)),
        (508, "GTModelInteriorDescriptor", _GTMODEL_ROLES),
        (510, "GTModelGeometry", _GTMODEL_ROLES + ("lod",)),
        (512, "GTModelSignature", _GTMODEL_ROLES + ("lod",)),
    ]
    for code, name, roles in gtmodel:
        layouts.append(DatasetLayout(code, name, DatasetFamily.GTMODEL, roles, grammar_for(code)))
    return tuple(layouts)


LAYOUTS: Tuple[DatasetLayout, ...] = _build_layouts()


def get_layouts(
    families: Optional[List[DatasetFamily]] = None, datasets: Optional[List[int]] = None
) -> List[DatasetLayout]:
    """Return registered layouts, optionally filtered by family and dataset code."""
    return [
        layout
        for layout in LAYOUTS
        if (families is None or layout.family in families)
        and (datasets is None or layout.code in datasets)
    ]


__all__ = [
    "FieldSpec",
    "FilenameGrammar",
    "DatasetLayout",
    "GRAMMARS",
    "LAYOUTS",
    "grammar_for",
    "entry_grammar_for",
    "get_layouts",
]
