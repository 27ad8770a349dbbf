"""Structured JSONL records of what each guard cycle did to the saves directory."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Any, Dict

from core.paths import get_logs_dir

from .types import CycleReport, DecodeFailure, DeletionOutcome, DeletionStatus, Notification, NotificationKind

LOGGER = logging.getLogger("tunicguard.guard")

_DELETION_EVENTS = {
    DeletionStatus.DELETED: ("save_deleted", logging.INFO),
    DeletionStatus.MISSING: ("save_missing", logging.INFO),
    DeletionStatus.FAILED: ("delete_failed", logging.ERROR),
}


class GuardLogger:
    """Append one JSON line per guard event to ``logs/guard.jsonl``.

    Every line carries ``event``, ``phase``, ``ok`` and ``ts``; the rest are the
    slot, generation and file the event concerns.
    """

    def __init__(self, working_dir: Path) -> None:
        self._log_path = get_logs_dir(Path(working_dir)) / "guard.jsonl"
        self._log_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = Lock()

    @property
    def log_path(self) -> Path:
        return self._log_path

    # ------------------------------------------------------------------
    def snapshot_failed(self, directory: Path, error: str) -> None:
        self._record("snapshot_failed", "snapshot", False, directory=str(directory), error=error)

    def decode_failed(self, failure: DecodeFailure) -> None:
        self._record("decode_failed", "snapshot", False, logging.WARNING, file=failure.filename, reason=failure.reason)

    def deletion(self, outcome: DeletionOutcome) -> None:
        event, level = _DELETION_EVENTS[outcome.status]
        extra: Dict[str, Any] = {
            "file": outcome.filename,
            "slot": outcome.save.slot_name,
            "generation": outcome.save.generation,
        }
        if outcome.error:
            extra["error"] = outcome.error
        self._record(event, "delete", outcome.ok, level, **extra)

    def notification(self, notification: Notification) -> None:
        if notification.kind is NotificationKind.PROTECTING_STARTED:
            self._record(
                "protecting_started",
                "reconcile",
                True,
                slot=notification.slot_name,
                generation=notification.generation,
            )
        else:
            self._record("protection_stopped", "reconcile", True, slot=notification.slot_name)

    def cycle_completed(self, report: CycleReport) -> None:
        self._record(
            "cycle_completed",
            "reconcile",
            report.ok,
            directory=str(report.directory),
            scanned=report.scanned,
            deleted=sum(1 for outcome in report.deletions if outcome.status is DeletionStatus.DELETED),
            failed=len(report.failed_deletions),
            skipped=len(report.decode_failures),
            protected=len(report.tracker),
        )

    # ------------------------------------------------------------------
    def _record(self, event: str, phase: str, ok: bool, level: int | None = None, **extra: Any) -> None:
        payload: Dict[str, Any] = {"event": event, "phase": phase, "ok": ok, **extra}
        payload["ts"] = datetime.now(timezone.utc).isoformat()
        line = json.dumps(payload, sort_keys=True, default=str)
        with self._lock:
            with self._log_path.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")
        if level is None:
            level = logging.INFO if ok else logging.ERROR
        LOGGER.log(level, "%s", line)


__all__ = ["GuardLogger"]
