"""Common dataclasses shared across guard modules."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:  # pragma: no cover - typing guard
    from .tracker import ProtectionTracker


@dataclass(frozen=True, slots=True, order=True)
class Save:
    """One generation of a save slot as found on disk."""

    slot_name: str
    generation: int = 0


@dataclass(frozen=True, slots=True)
class DeletionRequest:
    save: Save


class NotificationKind(str, Enum):
    PROTECTING_STARTED = "ProtectingStarted"
    PROTECTION_STOPPED = "ProtectionStopped"


@dataclass(frozen=True, slots=True)
class Notification:
    kind: NotificationKind
    slot_name: str
    generation: Optional[int] = None

    @property
    def message(self) -> str:
        if self.kind is NotificationKind.PROTECTING_STARTED:
            return f"Protecting {self.slot_name} with generation {self.generation}"
        return f"No longer protecting {self.slot_name}"


@dataclass(slots=True)
class ReconcileResult:
    tracker: "ProtectionTracker"
    deletions: List[DeletionRequest] = field(default_factory=list)
    notifications: List[Notification] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class DecodeFailure:
    """A candidate file that was skipped because its name could not be decoded."""

    filename: str
    reason: str
    slot_name: str = ""
    generation: int = -1

    @property
    def message(self) -> str:
        return f"Skipping {self.filename}: {self.reason}"


class DeletionStatus(str, Enum):
    DELETED = "deleted"
    MISSING = "missing"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class DeletionOutcome:
    save: Save
    filename: str
    status: DeletionStatus
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is not DeletionStatus.FAILED

    @property
    def message(self) -> str:
        if self.status is DeletionStatus.DELETED:
            return f"Deleted {self.filename}"
        if self.status is DeletionStatus.MISSING:
            return f"Already gone {self.filename}"
        return f"Failed to delete {self.filename}: {self.error}"


@dataclass(slots=True)
class CycleReport:
    ts: float
    directory: Path
    tracker: "ProtectionTracker"
    scanned: int = 0
    decode_failures: List[DecodeFailure] = field(default_factory=list)
    deletions: List[DeletionOutcome] = field(default_factory=list)
    notifications: List[Notification] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def failed_deletions(self) -> List[DeletionOutcome]:
        return [outcome for outcome in self.deletions if not outcome.ok]

    @property
    def ok(self) -> bool:
        return self.error is None and not self.failed_deletions

    def as_dict(self) -> dict:
        return {
            "ts": self.ts,
            "directory": str(self.directory),
            "ok": self.ok,
            "error": self.error,
            "scanned": self.scanned,
            "protected": self.tracker.as_dict(),
            "decode_failures": [
                {"filename": item.filename, "reason": item.reason} for item in self.decode_failures
            ],
            "deletions": [
                {"filename": item.filename, "status": item.status.value, "error": item.error}
                for item in self.deletions
            ],
            "notifications": [
                {"kind": item.kind.value, "slot_name": item.slot_name, "generation": item.generation}
                for item in self.notifications
            ],
        }


__all__ = [
    "CycleReport",
    "DecodeFailure",
    "DeletionOutcome",
    "DeletionRequest",
    "DeletionStatus",
    "Notification",
    "NotificationKind",
    "ReconcileResult",
    "Save",
]
