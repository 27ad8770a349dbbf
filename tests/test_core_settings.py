"""Tests for core.settings helpers."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from core.settings import SETTINGS_VERSION, load_settings, merge_defaults, save_settings, update_settings


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)


def test_merge_defaults_includes_poll_block() -> None:
    merged = merge_defaults({})

    assert merged["saves"] is None
    assert merged["poll"] == {"interval_s": 1.0, "halt_on_error": False}
    assert merged["logging"]["level"] == "INFO"
    assert merged["version"] == SETTINGS_VERSION


def test_merge_defaults_keeps_partial_blocks() -> None:
    merged = merge_defaults({"poll": {"interval_s": 3}})

    assert merged["poll"]["interval_s"] == 3
    assert merged["poll"]["halt_on_error"] is False


def test_load_settings_reads_legacy_config(tmp_path: Path) -> None:
    (tmp_path / "config.json").write_text(json.dumps({"saves": "C:/Saves"}), encoding="utf-8")

    loaded = load_settings(tmp_path / "work")

    assert loaded["saves"] == "C:/Saves"
    assert loaded["version"] == SETTINGS_VERSION
    assert loaded["poll"]["interval_s"] == 1.0


def test_settings_file_wins_over_legacy_config(tmp_path: Path) -> None:
    working_dir = tmp_path / "work"
    (tmp_path / "config.json").write_text(json.dumps({"saves": "legacy"}), encoding="utf-8")
    save_settings({"saves": "current"}, working_dir)

    assert load_settings(working_dir)["saves"] == "current"


def test_update_settings_round_trips(tmp_path: Path) -> None:
    working_dir = tmp_path / "work"

    update_settings(working_dir, saves="/games/tunic")
    stored = json.loads((working_dir / "settings.json").read_text(encoding="utf-8"))

    assert stored["saves"] == "/games/tunic"
    assert stored["working_dir"] == str(working_dir)
    assert stored["poll"]["halt_on_error"] is False


def test_unknown_keys_are_reported(tmp_path: Path) -> None:
    working_dir = tmp_path / "work"
    working_dir.mkdir()
    (working_dir / "settings.json").write_text(
        json.dumps({"saves": None, "colour": "blue", "poll": {"jitter": 1}}),
        encoding="utf-8",
    )

    loaded = load_settings(working_dir)

    assert loaded["colour"] == "blue"
    report = json.loads((working_dir / "logs" / "settings_unknown.json").read_text(encoding="utf-8"))
    assert report["unknown"] == ["colour", "poll.jitter"]


def test_corrupt_settings_fall_back_to_defaults(tmp_path: Path) -> None:
    working_dir = tmp_path / "work"
    working_dir.mkdir()
    (working_dir / "settings.json").write_text("{not json", encoding="utf-8")

    assert load_settings(working_dir)["saves"] is None
