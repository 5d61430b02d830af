"""Validation system for CDB Structure Tools.

This module provides the structure validation framework for CDB repositories:

- **Models**: Violation, CheckResult, ValidationReport - validation result data structures
- **Fields / Filenames**: Field validators and the filename pipeline
- **Walker / Archives**: Directory tree traversal and ZIP archive rules
- **Checks**: One check per dataset and concern (see validation/checks/)
- **Config**: Structural limits and severity rules (import from .config)
- **Registry**: run_validation(), print_report() - check orchestration and execution

Public API:
    Violation: One structural defect with its path
    CheckResult: Individual check result with severity and violations
    ValidationReport: Aggregated validation results with helper methods
    validate_filename: Validate one name against a grammar
    run_validation: Run all applicable validation checks on a CDB root
    print_report: Display validation results to console

Usage:
    >>> from cdb_structure.validation import run_validation, print_report
    >>> from pathlib import Path
    >>> report = run_validation(Path("/data/cdb"))
    >>> print_report(report)

For implementation details:
    - See validation/checks/__init__.py for check interface conventions
    - See validation/config.py for limits and severity configuration
    - See validation/registry.py for check orchestration
"""

from __future__ import annotations

from cdb_structure.core.enums import DatasetFamily, ViolationKind

from .filenames import validate_filename
from .models import CheckResult, ValidationReport, Violation
from .registry import print_report, run_validation

__all__ = [
    # Data models
    "Violation",
    "CheckResult",
    "ValidationReport",
    # Validators
    "validate_filename",
    # Runner functions
    "run_validation",
    "print_report",
    # Enums
    "DatasetFamily",
    "ViolationKind",
]
