from __future__ import annotations

from pathlib import Path
from typing import Optional

DEFAULT_TITLE = "TUNIC Save Directory"


def pick_directory(title: str = DEFAULT_TITLE, initial_dir: Optional[Path] = None) -> Optional[Path]:
    """Ask the user for a directory with the native picker; ``None`` when cancelled."""

    # Imported lazily so headless runs with a configured directory never need Tk.
    from tkinter import Tk, filedialog

    root = Tk()
    root.withdraw()
    try:
        root.attributes("-topmost", True)
        chosen = filedialog.askdirectory(
            parent=root,
            title=title,
            initialdir=str(initial_dir) if initial_dir else None,
            mustexist=True,
        )
    finally:
        root.destroy()
    if not chosen:
        return None
    return Path(chosen)


__all__ = ["DEFAULT_TITLE", "pick_directory"]
