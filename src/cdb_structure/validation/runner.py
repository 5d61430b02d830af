"""Bounded parallel leaf validation.

Leaf files are independent, so their validation runs on a thread pool.
Results are collected per leaf and re-assembled in the order the walker
produced the leaves, so output never depends on thread scheduling.

A ``ScanControl`` carries the shared deadline and cancellation flag. When
either trips, pending leaves are cancelled and only the violations of
completed leaves are returned, flagged as aborted.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from tqdm import tqdm

from cdb_structure.core.enums import ViolationKind
from .config import DEFAULT_WORKERS
from .models import Violation

logger = logging.getLogger(__name__)

LeafValidator = Callable[[Path], List[Violation]]

# Seconds between deadline checks while waiting on workers
_POLL_INTERVAL = 0.1


@dataclass
class ScanControl:
    """Deadline and cancellation shared by every check of one scan.

    Attributes:
        deadline: ``time.monotonic()`` value after which the scan stops, or None.
        cancel_event: Set by the caller to stop the scan.
        workers: Leaf validation pool size for every check.
        progress: Show per-check progress bars.
        abort_reason: Set once the scan has actually dropped work.
    """

    deadline: Optional[float] = None
    cancel_event: threading.Event = field(default_factory=threading.Event)
    workers: int = DEFAULT_WORKERS
    progress: bool = False
    abort_reason: Optional[str] = None

    @classmethod
    def create(
        cls,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
        workers: int = DEFAULT_WORKERS,
        progress: bool = False,
    ) -> "ScanControl":
        """Build a control whose deadline is ``timeout`` seconds from now."""
        deadline = time.monotonic() + timeout if timeout is not None else None
        event = cancel_event if cancel_event is not None else threading.Event()
        return cls(deadline, event, workers, progress)

    def stop_reason(self) -> Optional[str]:
        """Return why the scan must stop, or None to keep going."""
        if self.cancel_event.is_set():
            return "Scan cancelled"
        if self.deadline is not None and time.monotonic() >= self.deadline:
            return "Scan timed out"
        return None

    def should_stop(self) -> bool:
        return self.stop_reason() is not None

    def abort(self) -> None:
        """Record that work was dropped; the first reason wins."""
        if self.abort_reason is None:
            self.abort_reason = self.stop_reason() or "Scan aborted"

    @property
    def aborted(self) -> bool:
        return self.abort_reason is not None


def _validate_safely(validate_leaf: LeafValidator, path: Path) -> List[Violation]:
    try:
        return validate_leaf(path)
    except OSError as e:
        logger.debug("Unable to read %s: %s", path, e)
        return [Violation(f"Unable to read file: {e.strerror or e}", path, ViolationKind.IO)]


def run_leaves(
    entries: Sequence[Path],
    validate_leaf: LeafValidator,
    *,
    workers: Optional[int] = None,
    control: Optional[ScanControl] = None,
    progress: Optional[bool] = None,
    desc: str = "Validating",
) -> Tuple[List[Violation], bool]:
    """Validate leaves on a bounded pool and return violations in entry order.

    Args:
        entries: Leaf paths, already in walk order.
        validate_leaf: Function validating one leaf.
        workers: Pool size; 1 validates inline on the calling thread.
            Defaults to ``control.workers``.
        control: Shared deadline/cancellation; None never stops.
        progress: Show a tqdm progress bar. Defaults to ``control.progress``.
        desc: Progress bar label.

    Returns:
        Tuple of (violations in entry order, aborted).
    """
    control = control if control is not None else ScanControl()
    workers = control.workers if workers is None else workers
    progress = control.progress if progress is None else progress
    by_index: Dict[int, List[Violation]] = {}
    aborted = False

    pbar = tqdm(
        total=len(entries),
        desc=f"{desc:<31}",
        unit="files",
        disable=not progress,
        bar_format="{desc}{percentage:3.0f}%|{bar}| {n:>5}/{total:>5} [{elapsed}<{remaining}, {rate_fmt}]",
    )
    try:
        if workers <= 1:
            for i, path in enumerate(entries):
                if control.should_stop():
                    aborted = True
                    break
                by_index[i] = _validate_safely(validate_leaf, path)
                pbar.update(1)
        else:
            executor = ThreadPoolExecutor(max_workers=workers)
            try:
                futures: Dict[Future, int] = {
                    executor.submit(_validate_safely, validate_leaf, path): i
                    for i, path in enumerate(entries)
                }
                pending = set(futures)
                while pending:
                    done, pending = wait(pending, timeout=_POLL_INTERVAL, return_when=FIRST_COMPLETED)
                    for future in done:
                        by_index[futures[future]] = future.result()
                        pbar.update(1)
                    if pending and control.should_stop():
                        aborted = True
                        for future in pending:
                            future.cancel()
                        break
            finally:
                executor.shutdown(wait=True, cancel_futures=True)
    finally:
        pbar.close()

    if aborted:
        control.abort()
        logger.warning(
            "%s: validated %d of %d files", control.abort_reason, len(by_index), len(entries)
        )

    violations: List[Violation] = []
    for i in sorted(by_index):
        violations.extend(by_index[i])
    return violations, aborted


__all__ = ["LeafValidator", "ScanControl", "run_leaves"]
