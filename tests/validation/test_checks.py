"""Tests for the per-dataset checks."""

from __future__ import annotations

from pathlib import Path

import pytest

from cdb_structure.core.enums import DatasetFamily, ViolationKind
from cdb_structure.core.schemas import LAYOUTS
from cdb_structure.validation.checks import (
    ArchiveEntriesCheck,
    ArchiveStructureCheck,
    FilenameCheck,
)
from cdb_structure.validation.runner import ScanControl
from utils.cdb_builders import (
    VALID_306_ARCHIVE,
    VALID_500_FILE,
    gtmodel_dir,
    make_zip,
    tile_dir,
    write_file,
)

LAYOUT = {layout.code: layout for layout in LAYOUTS}


@pytest.fixture
def control() -> ScanControl:
    return ScanControl.create(workers=2)


def test_applicability():
    check = FilenameCheck(LAYOUT[306])
    assert check.check_id == "306_filenames"
    assert check.applies_to_family(DatasetFamily.TILES)
    assert not check.applies_to_family(DatasetFamily.GTMODEL)
    assert check.applies_to_dataset(306)
    assert not check.applies_to_dataset(300)


def test_absent_dataset_returns_no_result(cdb_root: Path, policy, control):
    assert FilenameCheck(LAYOUT[500]).validate(cdb_root, policy, control) == []
    assert ArchiveStructureCheck(LAYOUT[306]).validate(cdb_root, policy, control) == []


def test_empty_dataset_directory_passes(cdb_root: Path, policy, control):
    (cdb_root / "GTModel" / "500_GTModelGeometry").mkdir(parents=True)
    results = FilenameCheck(LAYOUT[500]).validate(cdb_root, policy, control)
    assert len(results) == 1
    assert results[0].passed
    assert results[0].dataset == "500_GTModelGeometry"


def test_filename_check_reports_structure_and_names(cdb_root: Path, policy, control):
    leaf_dir = gtmodel_dir(cdb_root, 500)
    write_file(leaf_dir / VALID_500_FILE)
    write_file(leaf_dir / "D500_S001_T001_AL015_1_Castle.flt")
    write_file(cdb_root / "GTModel" / "500_GTModelGeometry" / "notes.txt")

    (result,) = FilenameCheck(LAYOUT[500]).validate(cdb_root, policy, control)
    assert not result.passed
    assert [v.message for v in result.violations] == [
        "Invalid padding on Feature Sub-Code (1)",
        "Unexpected file at category level: notes.txt",
    ]
    assert result.fail_count == 2


def test_archive_checks_skip_misnamed_leaves(cdb_root: Path, policy, control):
    leaf_dir = tile_dir(cdb_root, 306)
    make_zip(leaf_dir / VALID_306_ARCHIVE)
    write_file(leaf_dir / "N62W162_D306_S001_T001_L07_U38_R102.7z", b"")

    (structure,) = ArchiveStructureCheck(LAYOUT[306]).validate(cdb_root, policy, control)
    (entries,) = ArchiveEntriesCheck(LAYOUT[306]).validate(cdb_root, policy, control)
    assert structure.passed
    assert entries.passed


def test_entries_check_leaves_container_errors_to_structure_check(cdb_root: Path, policy, control):
    write_file(tile_dir(cdb_root, 306) / VALID_306_ARCHIVE, b"not a zip")

    (structure,) = ArchiveStructureCheck(LAYOUT[306]).validate(cdb_root, policy, control)
    (entries,) = ArchiveEntriesCheck(LAYOUT[306]).validate(cdb_root, policy, control)
    assert [v.kind for v in structure.violations] == [ViolationKind.ARCHIVE_STRUCTURE]
    assert entries.passed
