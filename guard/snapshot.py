"""Read the saves directory into a decoded snapshot."""
from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List

from .codec import decode, is_save_filename
from .errors import DecodeError, SnapshotError
from .types import DecodeFailure, Save

LOGGER = logging.getLogger("tunicguard.guard.snapshot")


@dataclass(slots=True)
class DirectorySnapshot:
    directory: Path
    taken_at: float
    saves: List[Save] = field(default_factory=list)
    failures: List[DecodeFailure] = field(default_factory=list)

    def __iter__(self) -> Iterator[Save]:
        return iter(self.saves)

    def __len__(self) -> int:
        return len(self.saves)


def _list_candidates(directory: Path) -> List[str]:
    names: List[str] = []
    with os.scandir(directory) as entries:
        for entry in entries:
            if not is_save_filename(entry.name):
                continue
            # A stat failure propagates; skipping the entry would read as the slot vanishing.
            if not entry.is_file():
                continue
            names.append(entry.name)
    return names


def read_snapshot(directory: Path) -> DirectorySnapshot:
    """List *directory* and decode every save file in it.

    Listing failures raise :class:`SnapshotError`; a partial listing would look
    exactly like slots disappearing. Undecodable names are collected as
    failures instead of aborting the snapshot.
    """

    directory = Path(directory)
    try:
        names = _list_candidates(directory)
    except OSError as exc:
        raise SnapshotError(directory, exc) from exc

    snapshot = DirectorySnapshot(directory=directory, taken_at=time.time())
    for name in names:
        try:
            snapshot.saves.append(decode(name))
        except DecodeError as exc:
            LOGGER.debug("undecodable save name %s: %s", name, exc.reason)
            snapshot.failures.append(
                DecodeFailure(
                    filename=name,
                    reason=exc.reason,
                    slot_name=exc.slot_name,
                    generation=exc.generation,
                )
            )
    snapshot.saves.sort()
    snapshot.failures.sort(key=lambda item: item.filename)
    return snapshot


__all__ = ["DirectorySnapshot", "read_snapshot"]
