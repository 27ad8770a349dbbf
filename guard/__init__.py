"""Keep a single protected generation per TUNIC save slot."""
from __future__ import annotations

from .codec import decode, encode
from .cycle import run_cycle
from .errors import DecodeError, GuardError
from .reconcile import reconcile
from .tracker import ProtectionTracker
from .types import CycleReport, DeletionRequest, Notification, NotificationKind, Save

__all__ = [
    "CycleReport",
    "DecodeError",
    "DeletionRequest",
    "GuardError",
    "Notification",
    "NotificationKind",
    "ProtectionTracker",
    "Save",
    "decode",
    "encode",
    "reconcile",
    "run_cycle",
]
