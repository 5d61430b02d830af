"""ZIP archive structure validation.

GSModel tiles are stored as ZIP archives. An archive must be non-empty, at
most 32,000,000 bytes, a readable ZIP container, and store every entry
uncompressed. Entry names must follow the dataset's entry grammar.

Archives are never extracted: only the central directory is read. Each
archive is opened in a ``with`` block so the handle is released even when
a check fails halfway.
"""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from typing import List

from cdb_structure.core.enums import ViolationKind
from cdb_structure.core.schemas import FilenameGrammar
from cdb_structure.reference.policy import ReferencePolicy
from .config import MAX_ARCHIVE_SIZE
from .filenames import validate_filename
from .models import Violation

logger = logging.getLogger(__name__)

# Raised by ZipFile for malformed central directories (bad UTF-8 names, truncated records)
_CONTAINER_ERRORS = (zipfile.BadZipFile, UnicodeDecodeError, ValueError, EOFError)


def _structure_error(message: str, path: Path) -> Violation:
    return Violation(message, path, ViolationKind.ARCHIVE_STRUCTURE)


def validate_archive(path: Path, max_size: int = MAX_ARCHIVE_SIZE) -> List[Violation]:
    """Check container-level constraints of one archive.

    Rules are independent: size, container format and compression method are
    all reported. An unreadable container skips only the compression check.

    Raises:
        OSError: If the file cannot be stat'ed or read (reported by the caller).
    """
    violations: List[Violation] = []
    size = path.stat().st_size
    if size == 0:
        violations.append(_structure_error("Zero-length ZIP archive", path))
    if size > max_size:
        violations.append(
            _structure_error(f"ZIP archive exceeds {max_size // 1_000_000} Megabytes", path)
        )

    try:
        with zipfile.ZipFile(path) as zf:
            for info in zf.infolist():
                if info.compress_type != zipfile.ZIP_STORED:
                    violations.append(
                        _structure_error(
                            f"ZIP archive entry '{info.filename}' should not be compressed", path
                        )
                    )
    except _CONTAINER_ERRORS as e:
        logger.debug("Unreadable archive %s: %s", path, e)
        violations.append(_structure_error("Invalid ZIP archive file", path))
    return violations


def validate_entries(
    path: Path, grammar: FilenameGrammar, policy: ReferencePolicy
) -> List[Violation]:
    """Validate every entry name of an archive through the filename pipeline.

    Raises:
        OSError: If the file cannot be read (reported by the caller).
    """
    violations: List[Violation] = []
    try:
        with zipfile.ZipFile(path) as zf:
            names = [info.filename for info in zf.infolist()]
    except _CONTAINER_ERRORS as e:
        logger.debug("Unreadable archive %s: %s", path, e)
        return [_structure_error("Invalid ZIP archive file", path)]

    for name in names:
        violations += validate_filename(name, grammar, policy, entry_of=path)
    return violations
