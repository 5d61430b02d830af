"""Validation data models.

This module defines core data structures for validation results:
- Violation: One structural defect, with optional path context
- CheckResult: Outcome of a single validation check (one dataset, one concern)
- ValidationReport: Aggregated results from all checks of a scan
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

import pandas as pd

from cdb_structure.core.enums import ViolationKind


@dataclass(frozen=True)
class Violation:
    """A single structural violation.

    Attributes:
        message: Human-readable description (e.g. "Invalid latitude (N99)").
        path: File or directory the violation refers to, if any.
        kind: Violation classification.

    Examples:
        >>> v = Violation("Invalid latitude (N99)", Path("Tiles/N99/W162/x.zip"), ViolationKind.FIELD)
        >>> str(v)
        'Invalid latitude (N99): Tiles/N99/W162/x.zip'
    """

    message: str
    path: Optional[Path] = None
    kind: ViolationKind = ViolationKind.FORMAT

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message}: {self.path}"


@dataclass(frozen=True)
class CheckResult:
    """Result of a single validation check.

    Attributes:
        check_id: Unique identifier for the check (e.g., "306_archive_entries").
        dataset: Dataset directory name the check covers (e.g., "306_GSModelInteriorTexture").
        severity: Severity level - "error" for conformance failures, "warning" for review items.
        passed: True if check passed without issues, False otherwise.
        fail_count: Number of violations detected (0 if passed).
        violations: Violations in path order.

    Examples:
        >>> CheckResult(
        ...     check_id="306_filenames",
        ...     dataset="306_GSModelInteriorTexture",
        ...     severity="error",
        ...     passed=False,
        ...     fail_count=1,
        ...     violations=(Violation("Invalid latitude (N99)"),),
        ... )
    """

    check_id: str
    dataset: str
    severity: str  # "error" | "warning"
    passed: bool
    fail_count: int
    violations: Tuple[Violation, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate field constraints."""
        if self.severity not in ("error", "warning"):
            raise ValueError(f"Invalid severity: {self.severity}. Must be 'error' or 'warning'.")
        if self.passed and self.fail_count != 0:
            raise ValueError("passed=True requires fail_count=0")
        if not self.passed and self.fail_count == 0:
            raise ValueError("passed=False requires fail_count > 0")

    @property
    def messages(self) -> List[str]:
        return [str(v) for v in self.violations]


@dataclass
class ValidationReport:
    """Aggregated validation results for one scan of a CDB root.

    Attributes:
        results: List of check results, in registry order.
        root: CDB root directory that was scanned.
        aborted: True if the scan stopped early (timeout or cancellation).
        abort_reason: Why the scan stopped, when aborted.

    Examples:
        >>> report = ValidationReport(results=[check1, check2], root=Path("/data/cdb"))
        >>> report.has_errors()
        True
        >>> [str(v) for v in report.violations()]
        ['Invalid latitude (N99): Tiles/N99/...']
    """

    results: List[CheckResult]
    root: Path
    aborted: bool = False
    abort_reason: Optional[str] = None

    def violations(self) -> List[Violation]:
        """Return every violation, in check order then path order."""
        return [v for r in self.results for v in r.violations]

    def has_errors(self, strict: bool = False) -> bool:
        """Check if validation failed.

        An aborted scan always counts as failed.

        Args:
            strict: If True, treat warnings as errors. Default False.
        """
        if self.aborted:
            return True
        for result in self.results:
            if result.severity == "error" and not result.passed:
                return True
            if strict and result.severity == "warning" and not result.passed:
                return True
        return False

    def get_error_count(self) -> int:
        """Count total number of error-level violations."""
        return sum(r.fail_count for r in self.results if r.severity == "error" and not r.passed)

    def get_warning_count(self) -> int:
        """Count total number of warning-level violations."""
        return sum(r.fail_count for r in self.results if r.severity == "warning" and not r.passed)

    def get_failed_checks(self, severity: Optional[str] = None) -> List[CheckResult]:
        """Get all failed checks, optionally filtered by severity."""
        return [
            r for r in self.results if not r.passed and (severity is None or r.severity == severity)
        ]

    def summary(self) -> str:
        """Generate a concise text summary of validation results.

        Examples:
            >>> print(report.summary())
            Validation Summary:
              Root: /data/cdb
              Checks: 12 executed (11 passed, 0 warnings, 1 failed)
              Issues: 3 errors, 0 warnings
        """
        total = len(self.results)
        passed = sum(1 for r in self.results if r.passed)
        warning_checks = sum(1 for r in self.results if not r.passed and r.severity == "warning")
        failed_checks = sum(1 for r in self.results if not r.passed and r.severity == "error")

        lines = [
            "Validation Summary:",
            f"  Root: {self.root}",
            f"  Checks: {total} executed ({passed} passed, {warning_checks} warnings, "
            f"{failed_checks} failed)",
            f"  Issues: {self.get_error_count()} errors, {self.get_warning_count()} warnings",
        ]
        if self.aborted:
            lines.append(f"  Scan aborted: {self.abort_reason}")
        return "\n".join(lines)

    def to_markdown(self) -> str:
        """Generate detailed Markdown validation report."""
        from datetime import datetime

        passed_checks = sorted([r for r in self.results if r.passed], key=lambda x: x.check_id)
        failed_checks = self.get_failed_checks()

        lines = [
            f"# CDB Structure Report: {self.root.name}",
            "",
            f"**Root:** {self.root}",
            f"**Generated:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            "",
            "## Summary",
            "",
            f"- **Checks:** {len(self.results)}",
            f"- **Passed:** {len(passed_checks)} ✅",
            f"- **Failed:** {len(failed_checks)} ❌",
            f"- **Errors:** {self.get_error_count()}",
            f"- **Warnings:** {self.get_warning_count()}",
            "",
        ]

        if self.aborted:
            lines.append("## ⚠️ Scan Aborted")
            lines.append("")
            lines.append(f"{self.abort_reason}. Results below are incomplete.")
            lines.append("")

        if passed_checks:
            lines.append("## ✅ Passed Checks")
            lines.append("")
            for result in passed_checks:
                lines.append(f"- **{result.check_id}** ({result.dataset})")
            lines.append("")

        if not failed_checks:
            lines.append("## ✅ All Checks Passed")
            lines.append("")
            lines.append("No structural violations found.")
            lines.append("")
        else:
            lines.append("## ❌ Violations")
            lines.append("")
            for result in failed_checks:
                icon = "❌" if result.severity == "error" else "⚠️"
                lines.append(f"### {icon} {result.check_id} ({result.fail_count} violations)")
                lines.append("")
                for msg in result.messages:
                    lines.append(f"- {msg}")
                lines.append("")

        return "\n".join(lines)

    def to_json(self) -> str:
        """Generate detailed JSON validation report."""
        import json
        from datetime import datetime

        report_data = {
            "metadata": {
                "root": str(self.root),
                "generated_at": datetime.now().isoformat(),
                "aborted": self.aborted,
                "abort_reason": self.abort_reason,
            },
            "summary": {
                "total_checks": len(self.results),
                "passed": sum(1 for r in self.results if r.passed),
                "failed": len(self.get_failed_checks()),
                "errors": self.get_error_count(),
                "warnings": self.get_warning_count(),
            },
            "checks": [
                {
                    "check_id": r.check_id,
                    "dataset": r.dataset,
                    "severity": r.severity,
                    "passed": r.passed,
                    "fail_count": r.fail_count,
                    "violations": [
                        {
                            "message": v.message,
                            "path": str(v.path) if v.path is not None else None,
                            "kind": v.kind.value,
                        }
                        for v in r.violations
                    ],
                }
                for r in self.results
            ],
        }
        return json.dumps(report_data, indent=2, ensure_ascii=False)

    def to_dataframe(self) -> pd.DataFrame:
        """Flatten violations into a DataFrame (one row per violation)."""
        rows = [
            {
                "check_id": r.check_id,
                "dataset": r.dataset,
                "severity": r.severity,
                "kind": v.kind.value,
                "path": str(v.path) if v.path is not None else "",
                "message": v.message,
            }
            for r in self.results
            for v in r.violations
        ]
        return pd.DataFrame(
            rows, columns=["check_id", "dataset", "severity", "kind", "path", "message"]
        )

    def to_console_summary(self) -> str:
        """Generate a concise summary for console output."""
        lines = [self.summary(), ""]

        failed_checks = self.get_failed_checks()

        if not failed_checks:
            lines.append("✅ All structure checks passed!")
        else:
            lines.append("Check Details:")
            for result in failed_checks:
                icon = "❌" if result.severity == "error" else "⚠️"
                lines.append(
                    f"{icon} {result.check_id} ({result.severity}): {result.fail_count} violations"
                )
                if result.messages:
                    lines.append(f"   - {result.messages[0]}")

        return "\n".join(lines)
