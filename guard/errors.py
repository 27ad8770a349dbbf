"""Error hierarchy for save guard operations."""
from __future__ import annotations

from pathlib import Path
from typing import Optional


class GuardError(RuntimeError):
    """Base exception for save guard failures."""


class DecodeError(GuardError):
    """Raised when a candidate filename cannot be decoded into a save."""

    def __init__(self, filename: str, reason: str, *, slot_name: str = "", generation: int = -1) -> None:
        super().__init__(f"{filename}: {reason}")
        self.filename = filename
        self.reason = reason
        self.slot_name = slot_name
        self.generation = generation


class MalformedGeneration(DecodeError):
    """The suffix after the last delimiter is not a canonical generation number."""


class InvalidSlotName(DecodeError):
    """The slot name is empty or contains the generation delimiter."""


class SnapshotError(GuardError):
    """Raised when the saves directory cannot be listed."""

    def __init__(self, directory: Path, cause: OSError) -> None:
        super().__init__(f"Cannot list {directory}: {cause}")
        self.directory = directory
        self.cause = cause


class DeletionError(GuardError):
    """Raised when a save file cannot be removed."""

    def __init__(self, path: Path, cause: Optional[OSError] = None) -> None:
        detail = cause.strerror if cause is not None and cause.strerror else str(cause or "")
        super().__init__(f"Cannot delete {path}: {detail}" if detail else f"Cannot delete {path}")
        self.path = path
        self.cause = cause


class SaveNotFoundError(DeletionError):
    """The file was already gone when removal was attempted."""


class SavePermissionError(DeletionError):
    """The operating system refused to remove the file."""


class ConfigError(GuardError):
    """Raised when no usable saves directory is configured."""


class GuardHalted(GuardError):
    """Raised by the runner when a failed cycle must stop the loop."""


__all__ = [
    "ConfigError",
    "DecodeError",
    "DeletionError",
    "GuardError",
    "GuardHalted",
    "InvalidSlotName",
    "MalformedGeneration",
    "SaveNotFoundError",
    "SavePermissionError",
    "SnapshotError",
]
