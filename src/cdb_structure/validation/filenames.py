"""Filename validation pipeline.

A filename goes through three stages:

1. Structural pre-check: the underscore count must equal the grammar's
   expected separator count. A failure here is reported once and stops the
   pipeline, so one bad name does not cascade into many field errors.
2. Full grammar match.
3. Field validation driven by the grammar's field declarations. Every field
   is checked and every violation is kept.

The same pipeline validates entries inside archives; entry context changes
the messages and the violation kind.
"""

from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import List, Mapping, Optional

from cdb_structure.core.enums import FieldKind, ViolationKind
from cdb_structure.core.schemas import FilenameGrammar
from cdb_structure.reference.policy import ReferencePolicy
from . import fields as fv
from .models import Violation


def _dataset_for(parsed: Mapping[str, str], grammar: FilenameGrammar) -> str:
    if grammar.dataset_code is not None:
        return f"{grammar.dataset_code:03d}"
    return fv.dataset_code_text(parsed.get("dataset_code", ""))


def validate_fields(
    parsed: Mapping[str, str], grammar: FilenameGrammar, policy: ReferencePolicy
) -> List[Violation]:
    """Run the field validators declared by ``grammar`` on parsed fields.

    Fields absent from ``parsed`` (optional groups) are skipped.
    """
    violations: List[Violation] = []
    lod = parsed.get("lod", "")
    for spec in grammar.fields:
        raw = parsed.get(spec.name)
        if raw is None:
            continue
        kind = spec.kind
        if kind == FieldKind.LATITUDE:
            violations += fv.validate_latitude(raw)
        elif kind == FieldKind.LONGITUDE:
            violations += fv.validate_longitude(raw)
        elif kind == FieldKind.DATASET_CODE:
            violations += fv.validate_dataset_code(raw, policy)
        elif kind == FieldKind.CS1:
            violations += fv.validate_component_selectors(
                raw, parsed.get("cs2", ""), _dataset_for(parsed, grammar), policy
            )
        elif kind == FieldKind.CS2:
            continue  # validated together with CS1
        elif kind == FieldKind.LOD:
            violations += fv.validate_lod(raw)
        elif kind == FieldKind.UREF:
            violations += fv.validate_uref(raw, lod)
        elif kind == FieldKind.RREF:
            violations += fv.validate_rref(raw, lod)
        elif kind == FieldKind.FEATURE_CODE:
            violations += fv.validate_feature_code(raw, spec.width)
        elif kind == FieldKind.FEATURE_SUB_CODE:
            violations += fv.validate_padded_number(raw, spec.label, spec.width)
        elif kind in (FieldKind.MODEL_NAME, FieldKind.TEXTURE_NAME):
            violations += fv.validate_name_length(raw, spec.label, spec.max_length)
        elif kind == FieldKind.EXTENSION:
            violations += fv.validate_extension(raw, grammar.extensions, grammar.extension_role)
    return violations


def validate_filename(
    name: str,
    grammar: FilenameGrammar,
    policy: ReferencePolicy,
    *,
    path: Optional[Path] = None,
    entry_of: Optional[Path] = None,
) -> List[Violation]:
    """Validate one filename against a grammar.

    Args:
        name: Bare filename (or archive entry name).
        grammar: Grammar the name must match.
        policy: Reference policy for dataset code and component selectors.
        path: Path attached to every violation. Defaults to ``entry_of`` in
            entry context.
        entry_of: Archive containing ``name``; switches to entry context.

    Returns:
        Violations in field order; empty if the name conforms.

    Examples:
        >>> from cdb_structure.core.schemas import grammar_for
        >>> validate_filename("N62W162_D306_S001_T001_L07_U38_R102.zip", grammar_for(306), policy)
        []
    """
    path = path if path is not None else entry_of
    in_entry = entry_of is not None

    if in_entry:
        invalid, kind = f"Invalid entry '{name}' in ZIP archive", ViolationKind.ARCHIVE_ENTRY
    else:
        invalid, kind = f"Invalid file name: {name}", ViolationKind.FORMAT

    if grammar.separators is not None and name.count("_") != grammar.separators:
        detail = f"should be {grammar.separators} underscore separators"
        return [Violation(f"{invalid} ({detail})", path, kind)]

    parsed = grammar.match(name)
    if parsed is None:
        return [Violation(invalid, path, kind)]

    violations = validate_fields(parsed, grammar, policy)
    if in_entry:
        return [
            dataclasses.replace(
                v, message=f"{v.message} in entry '{name}'", path=path, kind=ViolationKind.ARCHIVE_ENTRY
            )
            for v in violations
        ]
    return [dataclasses.replace(v, path=path) for v in violations]
