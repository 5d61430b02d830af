"""Archive container check.

GSModel tile archives must be non-empty, at most 32,000,000 bytes, readable
ZIP files, and must store their entries uncompressed.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

from cdb_structure.core.enums import DatasetFamily
from cdb_structure.core.schemas import DatasetLayout
from cdb_structure.reference.policy import ReferencePolicy
from ..archives import validate_archive
from ..models import CheckResult
from ..runner import ScanControl
from ._common import run_layout_check


def is_archive(path: Path) -> bool:
    """Leaves named as ZIP files; others already fail the filename check."""
    return path.suffix == ".zip"


class ArchiveStructureCheck:
    """Validate size, container format and compression of archives."""

    def __init__(self, layout: DatasetLayout):
        if layout.leaf != "archive":
            raise ValueError(f"Dataset {layout.directory_name} does not store archives")
        self.layout = layout

    @property
    def check_id(self) -> str:
        return f"{self.layout.code:03d}_archives"

    def validate(
        self, root: Path, policy: ReferencePolicy, control: ScanControl
    ) -> List[CheckResult]:
        return run_layout_check(
            self.check_id,
            self.layout,
            root,
            control,
            validate_archive,
            leaf_filter=is_archive,
        )

    def applies_to_family(self, family: DatasetFamily) -> bool:
        return self.layout.family == family

    def applies_to_dataset(self, code: int) -> bool:
        return self.layout.code == code

    def __repr__(self) -> str:
        return f"ArchiveStructureCheck({self.layout.directory_name})"
