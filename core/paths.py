from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

__all__ = [
    "ensure_working_dir_structure",
    "get_default_settings_paths",
    "get_legacy_config_path",
    "get_logs_dir",
    "get_settings_path",
    "resolve_working_dir",
]

_APP_DIR_NAME = "TunicGuard"
_HOME_ENV = "TUNICGUARD_HOME"
_LEGACY_CONFIG_NAME = "config.json"


def _expand_path(value: str) -> Path:
    expanded = os.path.expandvars(os.path.expanduser(value))
    return Path(expanded).resolve()


def _ensure_writable_dir(path: Path) -> bool:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError:
        return False
    test_file = path / f".write_test_{os.getpid()}"
    try:
        with open(test_file, "w", encoding="utf-8") as handle:
            handle.write("ok")
        test_file.unlink(missing_ok=True)
        return True
    except OSError:
        try:
            if test_file.exists():
                test_file.unlink()
        except OSError:  # pragma: no cover - cleanup best effort
            pass
        return False


def _local_appdata_dir() -> Optional[Path]:
    local_appdata = os.environ.get("LOCALAPPDATA")
    if not local_appdata:
        return None
    try:
        return _expand_path(local_appdata)
    except (OSError, RuntimeError):
        return None


def resolve_working_dir() -> Path:
    """Resolve the TunicGuard working directory, creating it if required."""

    env_home = os.environ.get(_HOME_ENV)
    if env_home:
        try:
            env_path = _expand_path(env_home)
        except (OSError, RuntimeError):
            env_path = None
        if env_path and _ensure_writable_dir(env_path):
            return env_path

    local_base = _local_appdata_dir()
    if local_base is not None:
        candidate = local_base / _APP_DIR_NAME
        if _ensure_writable_dir(candidate):
            return candidate

    fallback = Path.home() / ".tunicguard"
    fallback.mkdir(parents=True, exist_ok=True)
    return fallback


def get_logs_dir(working_dir: Path) -> Path:
    return working_dir / "logs"


def get_settings_path(working_dir: Path) -> Path:
    return working_dir / "settings.json"


def get_legacy_config_path() -> Path:
    """Location of the ``config.json`` written by earlier releases (next to the process)."""

    return Path.cwd() / _LEGACY_CONFIG_NAME


def ensure_working_dir_structure(working_dir: Path) -> None:
    for directory in (working_dir, get_logs_dir(working_dir)):
        directory.mkdir(parents=True, exist_ok=True)


def get_default_settings_paths(working_dir: Path) -> list[Path]:
    """Return the search order for settings files."""

    return [get_settings_path(working_dir), get_legacy_config_path()]
