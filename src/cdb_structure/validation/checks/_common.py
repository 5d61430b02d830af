"""Shared helpers for dataset checks."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional

from cdb_structure.core.schemas import DatasetLayout
from ..config import get_severity
from ..models import CheckResult, Violation
from ..runner import ScanControl, run_leaves
from ..walker import WalkEntry, walk

logger = logging.getLogger(__name__)


def build_result(check_id: str, dataset: str, violations: List[Violation]) -> CheckResult:
    """Wrap a check's violations into a CheckResult.

    The result is an error if any violation kind is configured as an error.
    """
    severities = {get_severity(v.kind) for v in violations}
    severity = "error" if not violations or "error" in severities else "warning"
    return CheckResult(
        check_id=check_id,
        dataset=dataset,
        severity=severity,
        passed=not violations,
        fail_count=len(violations),
        violations=tuple(violations),
    )


def run_layout_check(
    check_id: str,
    layout: DatasetLayout,
    root: Path,
    control: ScanControl,
    validate_leaf: Callable[[Path], List[Violation]],
    *,
    structural: bool = False,
    leaf_filter: Optional[Callable[[Path], bool]] = None,
) -> List[CheckResult]:
    """Walk one dataset and validate its leaves.

    Args:
        check_id: Result identifier.
        layout: Dataset to walk.
        root: CDB root directory.
        control: Shared scan control.
        validate_leaf: Validator for each selected leaf.
        structural: Also report the walker's structural violations. Only one
            check per dataset should set this, so each is reported once.
        leaf_filter: Restricts which leaves are validated.

    Returns:
        One CheckResult, or an empty list when the dataset is absent.
    """
    entries = walk(root, layout, control)
    if entries is None:
        logger.debug("%s: dataset %s not present, skipping", check_id, layout.directory_name)
        return []

    selected: List[WalkEntry] = [
        e
        for e in entries
        if (e.is_leaf and (leaf_filter is None or leaf_filter(e.path)))
        or (structural and not e.is_leaf)
    ]
    by_path = {e.path: e for e in selected}

    def _validate(path: Path) -> List[Violation]:
        entry = by_path[path]
        if not entry.is_leaf:
            return list(entry.violations)
        return validate_leaf(path)

    violations, _ = run_leaves(
        [e.path for e in selected], _validate, control=control, desc=check_id
    )
    result = build_result(check_id, layout.directory_name, violations)
    if result.passed:
        logger.info("%s: %d paths passed", check_id, len(selected))
    else:
        logger.info("%s: %d violations", check_id, result.fail_count)
    return [result]
