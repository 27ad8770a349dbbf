from __future__ import annotations

import argparse
import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from core.logging_utils import configure_console_logging, configure_json_logging, release_logging
from core.paths import ensure_working_dir_structure, resolve_working_dir
from core.settings import load_settings, update_settings
from ui.picker import DEFAULT_TITLE, pick_directory

from .cycle import Notify, run_cycle
from .errors import ConfigError, GuardHalted
from .logs import GuardLogger
from .tracker import ProtectionTracker
from .types import CycleReport

LOGGER = logging.getLogger("tunicguard.guard.run")

MIN_INTERVAL_S = 0.1

Picker = Callable[[str], Optional[Path]]


@dataclass(slots=True)
class GuardSettings:
    interval_s: float = 1.0
    halt_on_error: bool = False


def merge_guard_settings(raw: Dict[str, Any] | None, overrides: Dict[str, Any] | None = None) -> GuardSettings:
    poll = dict((raw or {}).get("poll") or {})
    poll.update({key: value for key, value in (overrides or {}).items() if value is not None})
    cfg = GuardSettings()
    try:
        cfg.interval_s = max(MIN_INTERVAL_S, float(poll.get("interval_s", cfg.interval_s)))
    except (TypeError, ValueError):
        LOGGER.warning("invalid poll.interval_s %r, using %s", poll.get("interval_s"), cfg.interval_s)
    halt = poll.get("halt_on_error", cfg.halt_on_error)
    if isinstance(halt, bool):
        cfg.halt_on_error = halt
    else:
        LOGGER.warning("invalid poll.halt_on_error %r, using %s", halt, cfg.halt_on_error)
    return cfg


class CancellationToken:
    def __init__(self) -> None:
        self._evt = threading.Event()

    def set(self) -> None:
        self._evt.set()

    def is_set(self) -> bool:
        return self._evt.is_set()

    def wait(self, timeout: float) -> bool:
        return self._evt.wait(timeout)


def resolve_saves_dir(
    settings: Dict[str, Any],
    working_dir: Path,
    *,
    picker: Picker = pick_directory,
    pick: bool = False,
) -> Path:
    """Return the configured saves directory, asking the user once when none is stored."""

    configured = settings.get("saves")
    if isinstance(configured, str) and configured.strip() and not pick:
        return Path(configured).expanduser()
    chosen = picker(DEFAULT_TITLE)
    if not chosen:
        raise ConfigError("No saves directory selected")
    chosen = Path(chosen)
    update_settings(working_dir, saves=str(chosen))
    settings["saves"] = str(chosen)
    LOGGER.info("saves directory set to %s", chosen)
    return chosen


class GuardRunner:
    """Drive reconciliation cycles against one saves directory at a fixed cadence."""

    def __init__(
        self,
        saves_dir: Path,
        *,
        settings: Optional[GuardSettings] = None,
        logger: Optional[GuardLogger] = None,
        notify: Notify = print,
        tracker: Optional[ProtectionTracker] = None,
    ) -> None:
        self._saves_dir = Path(saves_dir)
        self._settings = settings or GuardSettings()
        self._logger = logger
        self._notify = notify
        self._tracker = tracker if tracker is not None else ProtectionTracker()
        self._cycles = 0

    # ------------------------------------------------------------------
    @property
    def tracker(self) -> ProtectionTracker:
        return self._tracker

    @property
    def cycles(self) -> int:
        return self._cycles

    # ------------------------------------------------------------------
    def tick(self) -> CycleReport:
        report = run_cycle(self._saves_dir, self._tracker, logger=self._logger, notify=self._notify)
        self._tracker = report.tracker
        self._cycles += 1
        if not report.ok and self._settings.halt_on_error:
            reason = report.error or "; ".join(outcome.message for outcome in report.failed_deletions)
            raise GuardHalted(reason)
        return report

    def run(self, token: Optional[CancellationToken] = None, *, max_cycles: Optional[int] = None) -> int:
        token = token or CancellationToken()
        LOGGER.info("guarding %s every %ss", self._saves_dir, self._settings.interval_s)
        while not token.is_set():
            self.tick()
            if max_cycles is not None and self._cycles >= max_cycles:
                break
            if token.wait(self._settings.interval_s):
                break
        return self._cycles


def cli(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Keep only the newest TUNIC save per slot")
    parser.add_argument("--saves", type=Path, default=None, help="Saves directory (overrides settings)")
    parser.add_argument("--pick", action="store_true", help="Choose the saves directory again")
    parser.add_argument("--interval", type=float, default=None, help="Seconds between polls")
    parser.add_argument("--once", action="store_true", help="Run a single cycle and exit")
    parser.add_argument("--json", action="store_true", help="Print the report of a --once run as JSON")
    parser.add_argument(
        "--halt-on-error",
        action="store_true",
        default=None,
        help="Stop when a cycle fails instead of retrying on the next poll",
    )
    parser.add_argument(
        "--working-dir",
        type=Path,
        default=None,
        help="Override working directory",
    )
    parser.add_argument("--verbose", action="store_true", help="Log debug output to stderr")
    args = parser.parse_args(argv)

    working_dir = args.working_dir or resolve_working_dir()
    ensure_working_dir_structure(working_dir)
    settings = load_settings(working_dir)
    log_settings = settings.get("logging") or {}
    configure_console_logging("DEBUG" if args.verbose else log_settings.get("level", "INFO"))
    if log_settings.get("json_file", True):
        configure_json_logging("tunicguard", working_dir)
    try:
        return _run_cli(args, settings, working_dir)
    finally:
        release_logging("tunicguard")


def _run_cli(args: argparse.Namespace, settings: Dict[str, Any], working_dir: Path) -> int:
    try:
        saves_dir = args.saves or resolve_saves_dir(settings, working_dir, pick=args.pick)
    except ConfigError as exc:
        LOGGER.error("%s", exc)
        return 2

    guard_settings = merge_guard_settings(
        settings,
        {"interval_s": args.interval, "halt_on_error": args.halt_on_error},
    )
    notify: Notify = (lambda message: None) if (args.once and args.json) else print
    runner = GuardRunner(saves_dir, settings=guard_settings, logger=GuardLogger(working_dir), notify=notify)
    try:
        if args.once:
            report = runner.tick()
            if args.json:
                print(json.dumps(report.as_dict(), indent=2))
            return 0 if report.ok else 1
        runner.run()
    except GuardHalted as exc:
        LOGGER.error("halted: %s", exc)
        return 1
    except KeyboardInterrupt:
        LOGGER.info("stopped after %d cycles", runner.cycles)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(cli())
