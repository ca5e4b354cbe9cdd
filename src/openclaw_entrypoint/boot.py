"""Boot sequence run once per container start, before the gateway is exec'd."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, MutableMapping, Optional, TypeVar

from .browser import (
    PrewarmOutcome,
    PrewarmStatus,
    discover_chromium_executable,
    prewarm,
    resolve_prewarm_executable,
)
from .config import (
    EnvironmentSnapshot,
    browser_user_data_dir,
    capture_environment,
    config_file_path,
    configure_playwright_browsers,
    configure_skills_path,
    link_persistent_storage,
    resolve_state_dir,
)
from .constants import (
    DEFAULT_DATA_ROOT,
    ENV_DATA_ROOT,
    ENV_PREWARM_DEADLINE,
    ENV_SKIP_PREWARM,
    PREWARM_DEADLINE_SECS,
)
from .migration import MigrationContext, MigrationResult, migrate

import logging
logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class BootReport:
    """What the boot sequence observed and did. Used for logging and tests."""

    snapshot: Optional[EnvironmentSnapshot] = None
    state_dir: Optional[str] = None
    config_file: Optional[str] = None
    browser_executable: Optional[str] = None
    migration: Optional[MigrationResult] = None
    prewarm: Optional[PrewarmOutcome] = None


def _guarded(step: str, fn: Callable[[], T], default: T) -> T:
    """Run one boot step; an unexpected failure is logged and boot continues."""
    try:
        return fn()
    except Exception:
        logger.exception("Boot step '%s' failed; continuing", step)
        return default


def prepare_environment(environ: MutableMapping[str, str]) -> None:
    """Link persistent storage and export PATH/Playwright variables for the main process."""
    home = (environ.get("HOME") or "").strip() or str(Path.home())
    data_root = (environ.get(ENV_DATA_ROOT) or "").strip() or DEFAULT_DATA_ROOT

    _guarded("link persistent storage", lambda: link_persistent_storage(data_root, home), False)
    _guarded("configure skills PATH", lambda: configure_skills_path(data_root, environ), False)
    _guarded("configure Playwright browsers", lambda: configure_playwright_browsers(home, environ), None)


def prewarm_disabled(environ: Mapping[str, str]) -> bool:
    return (environ.get(ENV_SKIP_PREWARM) or "").strip() == "1"


def prewarm_deadline(environ: Mapping[str, str]) -> float:
    """
    Read OPENCLAW_PREWARM_DEADLINE, falling back to the default on a missing,
    unparsable, non-positive, or infinite value.
    """
    raw = (environ.get(ENV_PREWARM_DEADLINE) or "").strip()
    if not raw:
        return PREWARM_DEADLINE_SECS
    try:
        deadline = float(raw)
    except ValueError:
        deadline = -1.0
    if not 0 < deadline < float("inf"):
        logger.warning(
            "Ignoring invalid %s=%r; using %gs", ENV_PREWARM_DEADLINE, raw, PREWARM_DEADLINE_SECS
        )
        return PREWARM_DEADLINE_SECS
    return deadline


def log_prewarm_outcome(outcome: PrewarmOutcome) -> None:
    if outcome.status is PrewarmStatus.SUCCESS:
        logger.info("Chromium profile created successfully (%.0fs)", outcome.elapsed)
    elif outcome.status is PrewarmStatus.TIMED_OUT:
        logger.warning(
            "Chromium pre-warm timed out (%s); the browser tool will bootstrap on first use",
            outcome.reason,
        )
    else:
        logger.info("Skipping Chromium pre-warm: %s", outcome.reason)


def run_boot_sequence(environ: Optional[MutableMapping[str, str]] = None) -> BootReport:
    """
    Prepare the environment, migrate the config, and pre-warm the browser profile.

    Never raises: every failure path ends with the report returned so the
    caller can still hand off to the main process.
    """
    if environ is None:
        environ = os.environ

    report = BootReport()

    prepare_environment(environ)

    report.snapshot = capture_environment(environ)
    report.state_dir = resolve_state_dir(report.snapshot)
    report.config_file = config_file_path(report.state_dir)
    logger.info("Config path: %s", report.config_file)

    report.browser_executable = _guarded(
        "discover Chromium",
        lambda: discover_chromium_executable(report.snapshot.browsers_root),
        None,
    )

    ctx = MigrationContext(env=report.snapshot, browser_executable=report.browser_executable)
    report.migration = _guarded(
        "migrate config",
        lambda: migrate(report.config_file, ctx),
        MigrationResult(changed=False, error="unexpected migration failure"),
    )

    if prewarm_disabled(environ):
        logger.info("Chromium pre-warm disabled by OPENCLAW_SKIP_PREWARM")
        return report

    def _prewarm() -> PrewarmOutcome:
        executable = resolve_prewarm_executable(report.browser_executable, environ)
        return prewarm(
            executable,
            browser_user_data_dir(report.state_dir),
            deadline=prewarm_deadline(environ),
        )

    report.prewarm = _guarded(
        "pre-warm Chromium",
        _prewarm,
        PrewarmOutcome(PrewarmStatus.SKIPPED, reason="unexpected pre-warm failure"),
    )
    log_prewarm_outcome(report.prewarm)
    return report


__all__ = [
    "BootReport",
    "prepare_environment",
    "prewarm_disabled",
    "prewarm_deadline",
    "log_prewarm_outcome",
    "run_boot_sequence",
]
