"""One polling cycle: snapshot, reconcile, delete, report."""
from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, Optional, TYPE_CHECKING

from .deletion import apply_deletions
from .errors import SnapshotError
from .reconcile import reconcile
from .snapshot import read_snapshot
from .tracker import ProtectionTracker
from .types import CycleReport

if TYPE_CHECKING:  # pragma: no cover - typing guard
    from .logs import GuardLogger

Notify = Callable[[str], None]


def run_cycle(
    directory: Path,
    tracker: ProtectionTracker,
    *,
    logger: Optional["GuardLogger"] = None,
    notify: Notify = print,
) -> CycleReport:
    """Reconcile *directory* once and return the report holding the next tracker.

    A listing failure does not raise: the report carries the error and the
    tracker passed in, so nothing is forgotten because of a bad read.
    """

    directory = Path(directory)
    started = time.time()
    try:
        snapshot = read_snapshot(directory)
    except SnapshotError as exc:
        notify(str(exc))
        if logger:
            logger.snapshot_failed(directory, str(exc))
        return CycleReport(ts=started, directory=directory, tracker=tracker, error=str(exc))

    for failure in snapshot.failures:
        notify(failure.message)
        if logger:
            logger.decode_failed(failure)

    result = reconcile(tracker, snapshot)
    outcomes = apply_deletions(directory, result.deletions, logger=logger)
    for outcome in outcomes:
        notify(outcome.message)

    for notification in result.notifications:
        notify(notification.message)
        if logger:
            logger.notification(notification)

    report = CycleReport(
        ts=started,
        directory=directory,
        tracker=result.tracker,
        scanned=len(snapshot),
        decode_failures=list(snapshot.failures),
        deletions=outcomes,
        notifications=list(result.notifications),
    )
    if logger and (outcomes or result.notifications or snapshot.failures):
        logger.cycle_completed(report)
    return report


__all__ = ["Notify", "run_cycle"]
