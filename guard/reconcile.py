"""Decide which save generations survive a polling cycle.

``reconcile`` never touches the filesystem. It looks at one snapshot, works out
which files have to go and which protections change, and hands those decisions
back as deletion requests and notifications for the caller to carry out.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from .tracker import ProtectionTracker
from .types import DeletionRequest, Notification, NotificationKind, ReconcileResult, Save


def _enforce_existing(tracker: ProtectionTracker, saves: Sequence[Save]) -> List[DeletionRequest]:
    requests: List[DeletionRequest] = []
    for save in saves:
        tracked = tracker.get(save.slot_name)
        if tracked is not None and tracked != save.generation:
            requests.append(DeletionRequest(save))
    return requests


def _choose_survivors(tracker: ProtectionTracker, saves: Sequence[Save]) -> Dict[str, int]:
    chosen: Dict[str, int] = {}
    for save in saves:
        if save.slot_name in tracker:
            continue
        current = chosen.get(save.slot_name)
        if current is None or save.generation > current:
            chosen[save.slot_name] = save.generation
    return chosen


def _supersede_newcomers(chosen: Dict[str, int], saves: Sequence[Save]) -> List[DeletionRequest]:
    requests: List[DeletionRequest] = []
    for save in saves:
        survivor = chosen.get(save.slot_name)
        if survivor is not None and survivor != save.generation:
            requests.append(DeletionRequest(save))
    return requests


def _commit_protections(tracker: ProtectionTracker, chosen: Dict[str, int]) -> List[Notification]:
    notifications: List[Notification] = []
    for slot_name in sorted(chosen):
        generation = chosen[slot_name]
        tracker.protect(slot_name, generation)
        notifications.append(Notification(NotificationKind.PROTECTING_STARTED, slot_name, generation))
    return notifications


def _collect_vanished(tracker: ProtectionTracker, saves: Sequence[Save]) -> List[Notification]:
    # Judged against the snapshot, not against what the deletions will leave behind.
    present = {save.slot_name for save in saves}
    notifications: List[Notification] = []
    for slot_name in list(tracker):
        if slot_name in present:
            continue
        tracker.forget(slot_name)
        notifications.append(Notification(NotificationKind.PROTECTION_STOPPED, slot_name))
    return notifications


def reconcile(tracker: ProtectionTracker, snapshot: Iterable[Save]) -> ReconcileResult:
    """Run one reconciliation pass of *snapshot* against *tracker*.

    The input tracker is left untouched; the returned result carries the
    updated copy together with the deletions to perform and the notifications
    to report.
    """

    saves = sorted(snapshot)
    updated = tracker.copy()

    deletions = _enforce_existing(updated, saves)
    chosen = _choose_survivors(updated, saves)
    deletions.extend(_supersede_newcomers(chosen, saves))

    notifications = _commit_protections(updated, chosen)
    notifications.extend(_collect_vanished(updated, saves))
    return ReconcileResult(tracker=updated, deletions=deletions, notifications=notifications)


__all__ = ["reconcile"]
