"""In-memory record of which generation is protected for each slot."""
from __future__ import annotations

from typing import Dict, Iterator, Mapping, Optional, Tuple


class ProtectionTracker:
    """Map slot names to their protected generation.

    A tracker is owned by whoever drives the reconciliation cycles and is handed
    to :func:`guard.reconcile.reconcile` on every call. It is never persisted; a
    fresh process starts empty and re-adopts whatever it finds on disk.
    """

    __slots__ = ("_protected",)

    def __init__(self, protected: Optional[Mapping[str, int]] = None) -> None:
        self._protected: Dict[str, int] = dict(protected or {})

    def __contains__(self, slot_name: object) -> bool:
        return slot_name in self._protected

    def __len__(self) -> int:
        return len(self._protected)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._protected))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ProtectionTracker):
            return self._protected == other._protected
        if isinstance(other, Mapping):
            return self._protected == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"ProtectionTracker({self._protected!r})"

    def get(self, slot_name: str) -> Optional[int]:
        return self._protected.get(slot_name)

    def items(self) -> Iterator[Tuple[str, int]]:
        for slot_name in sorted(self._protected):
            yield slot_name, self._protected[slot_name]

    def protect(self, slot_name: str, generation: int) -> None:
        self._protected[slot_name] = generation

    def forget(self, slot_name: str) -> None:
        self._protected.pop(slot_name, None)

    def copy(self) -> "ProtectionTracker":
        return ProtectionTracker(self._protected)

    def as_dict(self) -> Dict[str, int]:
        return dict(self._protected)


__all__ = ["ProtectionTracker"]
