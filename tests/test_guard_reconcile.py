"""Tests for guard.reconcile."""

from __future__ import annotations

from guard.reconcile import reconcile
from guard.tracker import ProtectionTracker
from guard.types import DeletionRequest, Notification, NotificationKind, Save


def _deleted(result) -> set:
    return {request.save for request in result.deletions}


def test_first_sighting_protects_single_save() -> None:
    result = reconcile(ProtectionTracker(), [Save("hero", 0)])

    assert result.tracker == {"hero": 0}
    assert result.deletions == []
    assert result.notifications == [Notification(NotificationKind.PROTECTING_STARTED, "hero", 0)]
    assert result.notifications[0].message == "Protecting hero with generation 0"


def test_first_sighting_keeps_only_newest_generation() -> None:
    snapshot = [Save("hero", 0), Save("hero", 3), Save("hero", 1)]

    result = reconcile(ProtectionTracker(), snapshot)

    assert result.tracker == {"hero": 3}
    assert _deleted(result) == {Save("hero", 0), Save("hero", 1)}
    assert result.notifications == [Notification(NotificationKind.PROTECTING_STARTED, "hero", 3)]


def test_tracked_slot_deletes_other_generations_without_notifying() -> None:
    tracker = ProtectionTracker({"hero": 3})

    result = reconcile(tracker, [Save("hero", 3), Save("hero", 5)])

    assert result.deletions == [DeletionRequest(Save("hero", 5))]
    assert result.tracker == {"hero": 3}
    assert result.notifications == []


def test_vanished_slot_is_forgotten() -> None:
    result = reconcile(ProtectionTracker({"hero": 3}), [])

    assert result.tracker == {}
    assert result.deletions == []
    assert result.notifications == [Notification(NotificationKind.PROTECTION_STOPPED, "hero")]
    assert result.notifications[0].message == "No longer protecting hero"


def test_tracked_slot_with_only_foreign_generations_keeps_protection() -> None:
    # The protected file is gone but a sibling exists in this snapshot: the
    # sibling is deleted and the slot stays tracked until it is fully absent.
    result = reconcile(ProtectionTracker({"hero": 3}), [Save("hero", 4)])

    assert _deleted(result) == {Save("hero", 4)}
    assert result.tracker == {"hero": 3}
    assert result.notifications == []

    after = reconcile(result.tracker, [])
    assert after.tracker == {}


def test_input_tracker_is_not_mutated() -> None:
    tracker = ProtectionTracker({"old": 1})

    result = reconcile(tracker, [Save("new", 2)])

    assert tracker == {"old": 1}
    assert result.tracker == {"new": 2}


def test_second_pass_over_same_snapshot_is_quiet() -> None:
    snapshot = [Save("hero", 0), Save("hero", 2), Save("mage", 7)]
    first = reconcile(ProtectionTracker(), snapshot)
    # The snapshot is deliberately unchanged: the deletions were not applied.
    second = reconcile(first.tracker, snapshot)

    assert second.notifications == []
    assert _deleted(second) == _deleted(first)

    survivors = [Save("hero", 2), Save("mage", 7)]
    third = reconcile(second.tracker, survivors)
    fourth = reconcile(third.tracker, survivors)
    assert third.deletions == [] and third.notifications == []
    assert fourth.deletions == [] and fourth.notifications == []


def test_readoption_after_disappearance_accepts_any_generation() -> None:
    first = reconcile(ProtectionTracker({"hero": 9}), [])
    assert first.tracker == {}

    second = reconcile(first.tracker, [Save("hero", 2)])

    assert second.tracker == {"hero": 2}
    assert second.deletions == []
    assert second.notifications == [Notification(NotificationKind.PROTECTING_STARTED, "hero", 2)]


def test_restart_with_converged_directory_deletes_nothing() -> None:
    snapshot = [Save("hero", 12), Save("mage", 0), Save("rogue", 3)]

    result = reconcile(ProtectionTracker(), snapshot)

    assert result.deletions == []
    assert result.tracker == {"hero": 12, "mage": 0, "rogue": 3}
    assert [item.slot_name for item in result.notifications] == ["hero", "mage", "rogue"]


def test_mixed_tracked_and_new_slots() -> None:
    tracker = ProtectionTracker({"hero": 3, "gone": 1})
    snapshot = [
        Save("hero", 3),
        Save("hero", 4),
        Save("mage", 1),
        Save("mage", 8),
        Save("mage", 2),
    ]

    result = reconcile(tracker, snapshot)

    assert [request.save for request in result.deletions] == [
        Save("hero", 4),
        Save("mage", 1),
        Save("mage", 2),
    ]
    assert result.tracker == {"hero": 3, "mage": 8}
    assert result.notifications == [
        Notification(NotificationKind.PROTECTING_STARTED, "mage", 8),
        Notification(NotificationKind.PROTECTION_STOPPED, "gone"),
    ]


def test_every_tracked_slot_matches_a_snapshot_save() -> None:
    # Every tracked generation here is still on disk. A tracked slot whose protected
    # file vanished while a sibling remains keeps its entry for one cycle; see
    # test_tracked_slot_with_only_foreign_generations_keeps_protection.
    snapshot = [Save("a", 1), Save("a", 5), Save("b", 0), Save("c", 2), Save("c", 9)]
    result = reconcile(ProtectionTracker({"b": 0, "c": 2, "d": 4}), snapshot)

    survivors = set(snapshot) - _deleted(result)
    for slot_name, generation in result.tracker.items():
        assert sum(1 for save in snapshot if save == Save(slot_name, generation)) == 1
    for slot_name in {save.slot_name for save in snapshot}:
        assert sum(1 for save in survivors if save.slot_name == slot_name) == 1
