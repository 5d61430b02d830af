"""Validation check registry and runner.

This module orchestrates validation checks:
- ALL_CHECKS: List of all available validation check instances
- run_validation(): Executes applicable checks and returns ValidationReport
- print_report(): Displays validation results to console
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Iterable, List, Optional

from cdb_structure.core.enums import DatasetFamily
from cdb_structure.core.schemas import LAYOUTS, DatasetLayout
from cdb_structure.reference.policy import ReferencePolicy, load_default_policy
from .checks import ArchiveEntriesCheck, ArchiveStructureCheck, FilenameCheck, ValidationCheck
from .config import DEFAULT_WORKERS
from .models import CheckResult, ValidationReport
from .runner import ScanControl

logger = logging.getLogger(__name__)


def build_checks(layouts: Iterable[DatasetLayout]) -> List[ValidationCheck]:
    """Create the checks for each layout: file names, then archive checks."""
    checks: List[ValidationCheck] = []
    for layout in layouts:
        checks.append(FilenameCheck(layout))
        if layout.leaf == "archive":
            checks.append(ArchiveStructureCheck(layout))
            checks.append(ArchiveEntriesCheck(layout))
    return checks


# Registry of all available validation checks, in layout order
ALL_CHECKS = build_checks(LAYOUTS)


def _check_root(root: Path) -> None:
    if not root.exists():
        raise FileNotFoundError(f"CDB root not found: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"CDB root is not a directory: {root}")
    try:
        next(root.iterdir(), None)
    except PermissionError as e:
        raise PermissionError(f"CDB root is not readable: {root}") from e


def run_validation(
    root: Path,
    policy: Optional[ReferencePolicy] = None,
    *,
    families: Optional[List[DatasetFamily]] = None,
    datasets: Optional[List[int]] = None,
    workers: int = DEFAULT_WORKERS,
    timeout: Optional[float] = None,
    cancel_event: Optional[threading.Event] = None,
    progress: bool = False,
) -> ValidationReport:
    """Run all applicable validation checks on a CDB repository.

    Args:
        root: CDB root directory.
        policy: Reference policy. Defaults to the bundled reference data.
        families: Only run checks for these dataset families.
        datasets: Only run checks for these dataset codes.
        workers: Leaf validation threads per check.
        timeout: Seconds after which the scan stops and reports what it has.
        cancel_event: Set from another thread to stop the scan.
        progress: Show progress bars.

    Returns:
        ValidationReport containing aggregated results from all applicable checks.
        Datasets absent from the tree produce no results.

    Raises:
        FileNotFoundError: If root does not exist.
        NotADirectoryError: If root is not a directory.
        PermissionError: If root cannot be listed.

    Examples:
        >>> report = run_validation(Path("/data/cdb"), datasets=[306])
        >>> print(report.summary())
    """
    root = Path(root)
    _check_root(root)
    if policy is None:
        policy = load_default_policy()

    control = ScanControl.create(timeout, cancel_event, workers=workers, progress=progress)

    # Filter and execute applicable checks
    all_results: List[CheckResult] = []
    for check in ALL_CHECKS:
        if families is not None and not any(check.applies_to_family(f) for f in families):
            continue
        if datasets is not None and not any(check.applies_to_dataset(d) for d in datasets):
            continue
        if control.should_stop():
            control.abort()
            break
        all_results.extend(check.validate(root, policy, control))
        if control.aborted:
            break

    if control.aborted:
        logger.warning("%s after %d checks", control.abort_reason, len(all_results))

    return ValidationReport(
        results=all_results,
        root=root,
        aborted=control.aborted,
        abort_reason=control.abort_reason,
    )


def print_report(report: ValidationReport) -> None:
    """Print validation report to console.

    Displays a summary followed by details of all failed checks.

    Args:
        report: ValidationReport to display.

    Examples:
        >>> report = run_validation(Path("/data/cdb"))
        >>> print_report(report)
        Validation Summary:
          Root: /data/cdb
          Checks: 3 executed (2 passed, 0 warnings, 1 failed)
          Issues: 1 errors, 0 warnings

        Failed Checks:
        ❌ 306_filenames (error): 1 violations
           - Invalid latitude (N99): /data/cdb/Tiles/N99/W162/...
    """
    print(report.summary())
    print()

    failed = report.get_failed_checks()

    if not failed:
        if report.aborted:
            print("⚠️ Scan aborted before all checks ran.")
        else:
            print("✅ All structure checks passed!")
        return

    print("Failed Checks:")
    for result in failed:
        icon = "❌" if result.severity == "error" else "⚠️"
        print(f"{icon} {result.check_id} ({result.severity}): {result.fail_count} violations")

        for msg in result.messages:
            print(f"   - {msg}")
