"""Command-line interface for CDB structure validation."""

import argparse
import logging
from pathlib import Path
from typing import List, Optional

import colorlog
import pandas as pd

from cdb_structure import __version__ as _PACKAGE_VERSION
from cdb_structure.core.enums import DatasetFamily
from cdb_structure.core.schemas import GRAMMARS, entry_grammar_for, get_layouts, grammar_for
from cdb_structure.reference.policy import ReferencePolicy, load_default_policy
from cdb_structure.validation.config import DEFAULT_WORKERS

# Family choices for argparse
FAMILY_CHOICES = [f.value for f in DatasetFamily]

# Exit codes
EXIT_OK = 0
EXIT_NOTHING_VALIDATED = 1
EXIT_VIOLATIONS = 2
EXIT_ABORTED = 3


def setup_logging(
    verbose: bool = False, warnings_only: bool = False, errors_only: bool = False
) -> None:
    logger = logging.getLogger()
    for h in list(logger.handlers):
        logger.removeHandler(h)
    log_format = (
        "%(asctime)s:%(levelname)s:%(name)s in %(filename)s:%(funcName)s:%(lineno)d: %(message)s"
    )
    log_colors = {
        "DEBUG": "cyan",
        "INFO": "green",
        "WARNING": "yellow",
        "ERROR": "red",
        "CRITICAL": "bold_red",
    }
    stream_handler = colorlog.StreamHandler()
    formatter = colorlog.ColoredFormatter(f"%(log_color)s{log_format}", log_colors=log_colors)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)
    if errors_only:
        logger.setLevel(logging.ERROR)
    elif warnings_only:
        logger.setLevel(logging.WARNING)
    else:
        logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def _load_policy(args: argparse.Namespace) -> ReferencePolicy:
    """Resolve the reference policy from --reference or the CSV pair.

    Raises:
        FileNotFoundError: If a given reference file does not exist.
        ValueError: If reference data is malformed or only one CSV is given.
    """
    reference = getattr(args, "reference", None)
    datasets_csv = getattr(args, "datasets_csv", None)
    selectors_csv = getattr(args, "selectors_csv", None)
    if reference:
        return ReferencePolicy.from_yaml(Path(reference))
    if datasets_csv or selectors_csv:
        if not (datasets_csv and selectors_csv):
            raise ValueError("--datasets-csv and --selectors-csv must be given together")
        return ReferencePolicy.from_csv(Path(datasets_csv), Path(selectors_csv))
    return load_default_policy()


def _report_path(option, root: Path, suffix: str) -> Path:
    """Resolve a --report style option to a file path.

    ``True`` (flag without value) writes to the current directory; reports
    are never written into the scanned tree.
    """
    report_dir = Path.cwd() if option is True else Path(option)
    report_dir.mkdir(parents=True, exist_ok=True)
    return report_dir / f"{root.name}_structure_validation.{suffix}"


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate the naming and directory structure of a CDB repository.

    Returns:
        0 if all validations passed without errors
        1 if nothing was validated (or the options are unusable)
        2 if any violations were found, or the root cannot be scanned
        3 if the scan was aborted (timeout or cancellation)
    """
    from cdb_structure.validation import registry

    root = Path(args.root).resolve()

    families: Optional[List[DatasetFamily]] = None
    if getattr(args, "family", None):
        families = [DatasetFamily(f) for f in args.family]

    datasets: Optional[List[int]] = None
    if getattr(args, "dataset", None):
        datasets = list(args.dataset)
        unknown = [d for d in datasets if not get_layouts(datasets=[d])]
        if unknown:
            logging.error(
                "No directory layout registered for dataset(s): %s",
                ", ".join(f"{d:03d}" for d in unknown),
            )
            return EXIT_NOTHING_VALIDATED

    try:
        policy = _load_policy(args)
    except (FileNotFoundError, ValueError) as e:
        logging.error("Unable to load reference data: %s", e)
        return EXIT_NOTHING_VALIDATED

    logging.info("Validating %s...", root)
    try:
        report = registry.run_validation(
            root,
            policy,
            families=families,
            datasets=datasets,
            workers=args.workers,
            timeout=args.timeout,
            progress=bool(getattr(args, "progress", False)),
        )
    except (FileNotFoundError, NotADirectoryError, PermissionError) as e:
        logging.error("Cannot scan CDB root: %s", e)
        return EXIT_VIOLATIONS

    registry.print_report(report)

    try:
        if args.report:
            report_path = _report_path(args.report, root, "md")
            with open(report_path, "w", encoding="utf-8") as f:
                f.write(report.to_markdown())
            logging.info("Markdown report saved: %s", report_path)

        if args.report_json:
            report_path = _report_path(args.report_json, root, "json")
            with open(report_path, "w", encoding="utf-8") as f:
                f.write(report.to_json())
            logging.info("JSON report saved: %s", report_path)

        if args.report_csv:
            csv_path = Path(args.report_csv)
            csv_path.parent.mkdir(parents=True, exist_ok=True)
            report.to_dataframe().to_csv(csv_path, index=False)
            logging.info("CSV report saved: %s", csv_path)
    except OSError as e:
        logging.error("Unable to write report: %s", e)
        return EXIT_VIOLATIONS

    if report.aborted:
        logging.error("%s; results are incomplete.", report.abort_reason)
        return EXIT_ABORTED

    if not report.results:
        logging.error("No datasets were validated.")
        return EXIT_NOTHING_VALIDATED

    if report.has_errors():
        logging.error(
            "Validation found %d violations across %d checks.",
            report.get_error_count(),
            len(report.get_failed_checks()),
        )
        return EXIT_VIOLATIONS

    logging.info("Validation passed for %s", root)
    return EXIT_OK


def cmd_check_name(args: argparse.Namespace) -> int:
    """Validate a single file name (or archive entry name) against a dataset grammar."""
    from cdb_structure.validation.filenames import validate_filename

    entry_of = Path(args.entry) if getattr(args, "entry", None) else None
    try:
        grammar = entry_grammar_for(args.dataset) if entry_of else grammar_for(args.dataset)
    except (KeyError, ValueError) as e:
        logging.error("Unknown dataset %s: %s", args.dataset, e)
        return EXIT_NOTHING_VALIDATED

    try:
        policy = _load_policy(args)
    except (FileNotFoundError, ValueError) as e:
        logging.error("Unable to load reference data: %s", e)
        return EXIT_NOTHING_VALIDATED

    violations = validate_filename(args.name, grammar, policy, entry_of=entry_of)
    if not violations:
        print(f"✅ {args.name}")
        return EXIT_OK
    print(f"❌ {args.name}")
    for v in violations:
        print(f"   - {v.message}")
    return EXIT_VIOLATIONS


def cmd_datasets(args: argparse.Namespace) -> int:
    """List registered dataset layouts, or every filename grammar with --grammars."""
    if getattr(args, "grammars", False):
        rows = [
            {
                "key": key,
                "separators": g.separators if g.separators is not None else "-",
                "extensions": ", ".join(g.extensions),
                "example": g.example,
            }
            for key, g in sorted(GRAMMARS.items())
        ]
    else:
        rows = [
            {
                "dataset": layout.directory_name,
                "family": layout.family.value,
                "levels": "/".join(layout.roles),
                "leaf": layout.leaf,
                "extensions": ", ".join(layout.grammar.extensions),
                "example": layout.grammar.example,
            }
            for layout in get_layouts()
        ]
    with pd.option_context("display.max_rows", None, "display.width", 200):
        print(pd.DataFrame(rows).to_string(index=False))
    return EXIT_OK


def _add_reference_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--reference",
        default=None,
        help="Reference data YAML (valid dataset codes and component selectors). Defaults to the bundled table.",
    )
    p.add_argument(
        "--datasets-csv",
        default=None,
        help="Dataset codes CSV (columns: code,name). Use with --selectors-csv instead of --reference.",
    )
    p.add_argument(
        "--selectors-csv",
        default=None,
        help="Component selectors CSV (columns: code,cs1,cs2). Use with --datasets-csv.",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="cdb-structure",
        description=f"CDB Structure Tools (v{_PACKAGE_VERSION})",
    )
    p.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    p.add_argument(
        "--warnings-only",
        action="store_true",
        help="Show only warnings and errors (overrides --verbose)",
    )
    p.add_argument(
        "--errors-only",
        action="store_true",
        help="Show only errors (overrides --warnings-only and --verbose)",
    )

    sub = p.add_subparsers(dest="command", required=True)

    p_validate = sub.add_parser("validate", help="Validate a CDB repository's naming and structure")
    p_validate.add_argument("--root", required=True, help="CDB root directory")
    p_validate.add_argument(
        "--family",
        action="append",
        choices=FAMILY_CHOICES,
        default=None,
        help="Only validate this dataset family (repeatable).",
    )
    p_validate.add_argument(
        "--dataset",
        action="append",
        type=int,
        default=None,
        help="Only validate this dataset code, e.g. 306 (repeatable).",
    )
    _add_reference_args(p_validate)
    p_validate.add_argument(
        "--workers",
        type=int,
        default=DEFAULT_WORKERS,
        help=f"Worker threads for file validation (default {DEFAULT_WORKERS}; 1 runs inline)",
    )
    p_validate.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Stop after this many seconds and report partial results",
    )
    p_validate.add_argument("--progress", action="store_true", help="Show progress bars")
    p_validate.add_argument(
        "--report",
        nargs="?",
        const=True,
        default=False,
        help="Generate detailed Markdown report. Optionally specify custom directory path.",
    )
    p_validate.add_argument(
        "--report-json",
        nargs="?",
        const=True,
        default=False,
        help="Generate detailed JSON report. Optionally specify custom directory path.",
    )
    p_validate.add_argument(
        "--report-csv",
        default=None,
        help="Write one row per violation to this CSV file",
    )
    p_validate.set_defaults(func=cmd_validate)

    p_check = sub.add_parser("check-name", help="Validate a single file name")
    p_check.add_argument("name", help="File name, e.g. N62W162_D306_S001_T001_L07_U38_R102.zip")
    p_check.add_argument(
        "--dataset", required=True, help="Dataset code (e.g. 306, D306 or 500)"
    )
    p_check.add_argument(
        "--entry",
        default=None,
        metavar="ARCHIVE",
        help="Validate NAME as an entry of this archive using the dataset's entry grammar",
    )
    _add_reference_args(p_check)
    p_check.set_defaults(func=cmd_check_name)

    p_datasets = sub.add_parser("datasets", help="List registered dataset layouts")
    p_datasets.add_argument(
        "--grammars", action="store_true", help="List every registered filename grammar instead"
    )
    p_datasets.set_defaults(func=cmd_datasets)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(
        verbose=bool(args.verbose),
        warnings_only=bool(getattr(args, "warnings_only", False)),
        errors_only=bool(getattr(args, "errors_only", False)),
    )
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
