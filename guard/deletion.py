"""Remove superseded save files from the saves directory."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Optional, TYPE_CHECKING

from .codec import encode
from .errors import DeletionError, SaveNotFoundError, SavePermissionError
from .types import DeletionOutcome, DeletionRequest, DeletionStatus, Save

if TYPE_CHECKING:  # pragma: no cover - typing guard
    from .logs import GuardLogger


def remove_save(directory: Path, save: Save) -> Path:
    """Delete the file backing *save* and return its path."""

    path = Path(directory) / encode(save)
    try:
        os.remove(path)
    except FileNotFoundError as exc:
        raise SaveNotFoundError(path, exc) from exc
    except PermissionError as exc:
        raise SavePermissionError(path, exc) from exc
    except OSError as exc:
        raise DeletionError(path, exc) from exc
    return path


def apply_deletions(
    directory: Path,
    requests: Iterable[DeletionRequest],
    *,
    logger: Optional["GuardLogger"] = None,
) -> List[DeletionOutcome]:
    """Carry out every request, recording a per-file outcome instead of stopping at the first error."""

    outcomes: List[DeletionOutcome] = []
    for request in requests:
        save = request.save
        filename = encode(save)
        try:
            remove_save(directory, save)
        except SaveNotFoundError:
            outcome = DeletionOutcome(save, filename, DeletionStatus.MISSING)
        except DeletionError as exc:
            outcome = DeletionOutcome(save, filename, DeletionStatus.FAILED, error=str(exc))
        else:
            outcome = DeletionOutcome(save, filename, DeletionStatus.DELETED)
        if logger:
            logger.deletion(outcome)
        outcomes.append(outcome)
    return outcomes


__all__ = ["apply_deletions", "remove_save"]
