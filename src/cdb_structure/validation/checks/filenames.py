"""Filename conformance check.

Every file of a dataset must match the dataset's filename grammar, and the
directories leading to it must follow the dataset layout. Archives are
validated here by name only; their contents belong to the archive checks.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

from cdb_structure.core.enums import DatasetFamily
from cdb_structure.core.schemas import DatasetLayout
from cdb_structure.reference.policy import ReferencePolicy
from ..filenames import validate_filename
from ..models import CheckResult, Violation
from ..runner import ScanControl
from ._common import run_layout_check


class FilenameCheck:
    """Validate file names and directory structure of one dataset."""

    def __init__(self, layout: DatasetLayout):
        self.layout = layout

    @property
    def check_id(self) -> str:
        return f"{self.layout.code:03d}_filenames"

    def validate(
        self, root: Path, policy: ReferencePolicy, control: ScanControl
    ) -> List[CheckResult]:
        """Check every path of the dataset.

        Args:
            root: CDB root directory.
            policy: Reference policy for codes and component selectors.
            control: Shared scan control.

        Returns:
            One CheckResult, or an empty list when the dataset is absent.
        """
        grammar = self.layout.grammar

        def _validate(path: Path) -> List[Violation]:
            return validate_filename(path.name, grammar, policy, path=path)

        return run_layout_check(self.check_id, self.layout, root, control, _validate, structural=True)

    def applies_to_family(self, family: DatasetFamily) -> bool:
        return self.layout.family == family

    def applies_to_dataset(self, code: int) -> bool:
        return self.layout.code == code

    def __repr__(self) -> str:
        return f"FilenameCheck({self.layout.directory_name})"
