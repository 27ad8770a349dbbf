from pathlib import Path

import pytest

from ui.picker import DEFAULT_TITLE, pick_directory

tkinter = pytest.importorskip("tkinter")
from tkinter import filedialog  # noqa: E402


class FakeRoot:
    def __init__(self) -> None:
        self.withdrawn = False
        self.destroyed = False

    def withdraw(self) -> None:
        self.withdrawn = True

    def attributes(self, *args) -> None:
        pass

    def destroy(self) -> None:
        self.destroyed = True


def _install(monkeypatch, answer):
    root = FakeRoot()
    calls = []

    def askdirectory(**kwargs):
        calls.append(kwargs)
        return answer

    monkeypatch.setattr(tkinter, "Tk", lambda: root)
    monkeypatch.setattr(filedialog, "askdirectory", askdirectory)
    return root, calls


def test_pick_directory_returns_choice(monkeypatch, tmp_path):
    root, calls = _install(monkeypatch, str(tmp_path))

    assert pick_directory() == Path(tmp_path)
    assert calls[0]["title"] == DEFAULT_TITLE
    assert root.withdrawn and root.destroyed


def test_pick_directory_cancelled(monkeypatch):
    root, _ = _install(monkeypatch, "")

    assert pick_directory("Pick") is None
    assert root.destroyed
