"""Directory tree walker for CDB dataset layouts.

One generic walker replaces per-dataset nested loops. A ``DatasetLayout``
declares the node roles between the dataset directory and its leaf files;
the walker descends exactly that many levels and returns every leaf file.

Tile datasets live under ``Tiles/{lat}/{lon}/{code}_{name}``; the walker
expands the tile levels first and then walks each tile's dataset directory.
Other families live directly under ``{family}/{code}_{name}``.

Traversal is lexicographic per path segment, so two walks of an unchanged
tree return the same entries in the same order.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from cdb_structure.core.enums import DatasetFamily, ViolationKind
from cdb_structure.core.schemas import DatasetLayout
from .models import Violation
from .runner import ScanControl

logger = logging.getLogger(__name__)

# Directory name patterns per node role; roles without a pattern accept any name
ROLE_PATTERNS = {
    "lat": re.compile(r"[NS][0-9]{2}"),
    "lon": re.compile(r"[EW][0-9]{3}"),
    "lod": re.compile(r"LC|L[0-9]{2}"),
    "uref": re.compile(r"U[0-9]+"),
}


@dataclass(frozen=True)
class WalkEntry:
    """A path found by the walker with the structural violations found there.

    Leaf files have ``is_leaf=True`` and are handed to file validation.
    Non-leaf entries only carry violations (stray files, bad directories).
    """

    path: Path
    violations: Tuple[Violation, ...] = field(default_factory=tuple)
    is_leaf: bool = True


def _list_dir(directory: Path) -> List[Path]:
    return sorted(
        (p for p in directory.iterdir() if not p.name.startswith(".")), key=lambda p: p.name
    )


def _read_error(directory: Path, error: OSError) -> WalkEntry:
    return WalkEntry(
        directory,
        (Violation(f"Unable to read directory: {error.strerror or error}", directory, ViolationKind.IO),),
        is_leaf=False,
    )


def _stopped(control: Optional[ScanControl]) -> bool:
    """Check the deadline and cancel flag; record the abort when either trips."""
    if control is None or not control.should_stop():
        return False
    control.abort()
    return True


def _walk_levels(
    directory: Path,
    roles: Tuple[str, ...],
    entries: List[WalkEntry],
    control: Optional[ScanControl] = None,
) -> None:
    if _stopped(control):
        return
    try:
        children = _list_dir(directory)
    except OSError as e:
        entries.append(_read_error(directory, e))
        return

    if not roles:
        for child in children:
            if child.is_file():
                entries.append(WalkEntry(child))
            else:
                entries.append(
                    WalkEntry(
                        child,
                        (Violation(f"Unexpected directory at file level: {child.name}", child),),
                        is_leaf=False,
                    )
                )
        return

    role, rest = roles[0], roles[1:]
    pattern = ROLE_PATTERNS.get(role)
    for child in children:
        if not child.is_dir():
            entries.append(
                WalkEntry(
                    child,
                    (Violation(f"Unexpected file at {role} level: {child.name}", child),),
                    is_leaf=False,
                )
            )
        elif pattern is not None and not pattern.fullmatch(child.name):
            entries.append(
                WalkEntry(
                    child,
                    (Violation(f"Invalid {role} directory name: {child.name}", child),),
                    is_leaf=False,
                )
            )
        else:
            _walk_levels(child, rest, entries, control)


def _walk_tiles(
    tiles_root: Path,
    layout: DatasetLayout,
    entries: List[WalkEntry],
    control: Optional[ScanControl],
) -> bool:
    """Walk the layout's dataset directory inside every ``Tiles/{lat}/{lon}``.

    Malformed tile directories are skipped so each one is not reported once
    per dataset. Unreadable tile directories are reported as IO violations.

    Returns:
        True if at least one dataset directory was found.
    """
    found = False
    try:
        lats = _list_dir(tiles_root)
    except OSError as e:
        entries.append(_read_error(tiles_root, e))
        return found
    for lat in lats:
        if not lat.is_dir() or not ROLE_PATTERNS["lat"].fullmatch(lat.name):
            logger.debug("Skipping non-latitude entry %s", lat)
            continue
        if _stopped(control):
            return found
        try:
            lons = _list_dir(lat)
        except OSError as e:
            entries.append(_read_error(lat, e))
            continue
        for lon in lons:
            if not lon.is_dir() or not ROLE_PATTERNS["lon"].fullmatch(lon.name):
                logger.debug("Skipping non-longitude entry %s", lon)
                continue
            candidate = lon / layout.directory_name
            if candidate.is_dir():
                found = True
                _walk_levels(candidate, layout.roles, entries, control)
    return found


def walk(
    root: Path, layout: DatasetLayout, control: Optional[ScanControl] = None
) -> Optional[List[WalkEntry]]:
    """Walk one dataset's tree and return its leaves and structural violations.

    A missing dataset directory is not an error: datasets are optional.

    Args:
        root: CDB root directory.
        layout: Layout of the dataset to walk.
        control: Deadline and cancellation, checked once per directory. When
            it trips, the abort is recorded on it and the entries found so
            far are returned.

    Returns:
        Entries in lexicographic path order, or None when the dataset is absent.
    """
    family_root = root / layout.family.value
    entries: List[WalkEntry] = []
    if not family_root.is_dir():
        present = False
    elif layout.family == DatasetFamily.TILES:
        present = _walk_tiles(family_root, layout, entries, control)
    else:
        dataset_dir = family_root / layout.directory_name
        present = dataset_dir.is_dir()
        if present:
            _walk_levels(dataset_dir, layout.roles, entries, control)

    if not present and not (control is not None and control.aborted):
        if entries:
            logger.warning(
                "Dataset %s not found; unreadable tile directories: %s",
                layout.directory_name,
                ", ".join(str(e.path) for e in entries),
            )
        else:
            logger.debug("Dataset %s not present under %s", layout.directory_name, root)
        return None
    return entries
