"""Validation checks base interface.

This module defines the protocol (interface) that all validation checks must implement.
Each check covers one dataset and one concern (file names, archive containers,
archive entries).

To implement a new validation check:

1. Create a new file in this directory (e.g., `my_check.py`)
2. Define a class that implements the ValidationCheck protocol
3. Implement the required methods: `validate()`, `applies_to_family()` and
   `applies_to_dataset()`
4. Add the check to `build_checks()` in registry.py

Example:
    ```python
    # checks/my_check.py
    from typing import List
    from pathlib import Path
    from cdb_structure.core.enums import DatasetFamily
    from ..models import CheckResult
    from ._common import run_layout_check

    class MyCheck:
        def __init__(self, layout):
            self.layout = layout

        def validate(self, root: Path, policy, control) -> List[CheckResult]:
            return run_layout_check("my_check", self.layout, root, control, my_leaf_validator)

        def applies_to_family(self, family: DatasetFamily) -> bool:
            return self.layout.family == family

        def applies_to_dataset(self, code: int) -> bool:
            return self.layout.code == code
    ```
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Protocol

from cdb_structure.core.enums import DatasetFamily
from cdb_structure.reference.policy import ReferencePolicy
from ..models import CheckResult
from ..runner import ScanControl
from .archive_entries import ArchiveEntriesCheck
from .archive_structure import ArchiveStructureCheck
from .filenames import FilenameCheck


class ValidationCheck(Protocol):
    """Protocol defining the interface for validation checks.

    All validation checks must implement this interface. Use duck typing
    (Protocol) for flexibility - no need to inherit from a base class.

    Methods:
        validate: Run the validation check and return results.
        applies_to_family: Determine if check covers a dataset family.
        applies_to_dataset: Determine if check covers a dataset code.
    """

    check_id: str

    def validate(
        self,
        root: Path,
        policy: ReferencePolicy,
        control: ScanControl,
    ) -> List[CheckResult]:
        """Run the validation check.

        Args:
            root: CDB root directory.
            policy: Reference policy (valid codes and component selectors).
            control: Shared deadline, cancellation and pool settings.

        Returns:
            List of CheckResult objects. Return an empty list when the
            dataset the check covers is not present.

        Examples:
            >>> results = check.validate(root, policy, ScanControl())
            >>> for r in results:
            ...     if not r.passed:
            ...         print(f"Failed: {r.check_id} ({r.fail_count} issues)")
        """
        ...

    def applies_to_family(self, family: DatasetFamily) -> bool:
        """Check if this validation covers a dataset family.

        Examples:
            >>> FilenameCheck(layout_306).applies_to_family(DatasetFamily.TILES)
            True
        """
        ...

    def applies_to_dataset(self, code: int) -> bool:
        """Check if this validation covers a dataset code."""
        ...


__all__ = [
    "ValidationCheck",
    "FilenameCheck",
    "ArchiveStructureCheck",
    "ArchiveEntriesCheck",
]
