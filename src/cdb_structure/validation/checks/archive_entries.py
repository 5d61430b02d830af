"""Archive entry naming check.

Each file stored inside a GSModel archive is named like a tile file plus a
model or texture suffix, and goes through the same filename pipeline as
files on disk.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

from cdb_structure.core.enums import DatasetFamily, ViolationKind
from cdb_structure.core.schemas import DatasetLayout
from cdb_structure.reference.policy import ReferencePolicy
from ..archives import validate_entries
from ..models import CheckResult, Violation
from ..runner import ScanControl
from ._common import run_layout_check
from .archive_structure import is_archive


class ArchiveEntriesCheck:
    """Validate the names of the entries inside every archive of a dataset."""

    def __init__(self, layout: DatasetLayout):
        if layout.entry_grammar is None:
            raise ValueError(f"Dataset {layout.directory_name} has no archive entry grammar")
        self.layout = layout

    @property
    def check_id(self) -> str:
        return f"{self.layout.code:03d}_archive_entries"

    def validate(
        self, root: Path, policy: ReferencePolicy, control: ScanControl
    ) -> List[CheckResult]:
        grammar = self.layout.entry_grammar

        def _validate(path: Path) -> List[Violation]:
            # Unreadable containers are reported by the archive structure check
            return [
                v
                for v in validate_entries(path, grammar, policy)
                if v.kind != ViolationKind.ARCHIVE_STRUCTURE
            ]

        return run_layout_check(
            self.check_id, self.layout, root, control, _validate, leaf_filter=is_archive
        )

    def applies_to_family(self, family: DatasetFamily) -> bool:
        return self.layout.family == family

    def applies_to_dataset(self, code: int) -> bool:
        return self.layout.code == code

    def __repr__(self) -> str:
        return f"ArchiveEntriesCheck({self.layout.directory_name})"
