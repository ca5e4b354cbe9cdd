"""Chromium profile pre-warming.

The host application's browser launcher expects `Local State` and
`Default/Preferences` to exist in its user-data dir. Without them the first
browser tool call runs a bootstrap phase that can time out, so the
entrypoint launches Chromium once, headless, lets it write its profile state,
and shuts it down again before the main process starts.
"""

import enum
import os
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .chrome_executable import is_executable_file
from .chrome_launcher import build_prewarm_command, launch_chrome_process
from .chrome_process import terminate_process_tree
from ..constants import (
    PREWARM_DEADLINE_SECS,
    PREWARM_DEBUG_PORT,
    PREWARM_POLL_INTERVAL_SECS,
    PREWARM_TERMINATE_TIMEOUT_SECS,
    PROFILE_DEFAULT_DIR,
    PROFILE_MARKER_FILE,
)

import logging
logger = logging.getLogger(__name__)


class PrewarmStatus(enum.Enum):
    SUCCESS = "success"
    TIMED_OUT = "timed_out"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class PrewarmOutcome:
    """
    Result of a pre-warm attempt. Logged, never persisted.

    Attributes:
        status: What happened
        reason: Human-readable explanation (always set for SKIPPED)
        elapsed: Seconds spent polling
        pid: Pid of the launched Chromium, if one was launched
    """

    status: PrewarmStatus
    reason: str = ""
    elapsed: float = 0.0
    pid: Optional[int] = None


def profile_initialized(profile_dir: str) -> bool:
    """Check for the files Chromium writes once a profile is fully set up."""
    return (
        os.path.isfile(os.path.join(profile_dir, PROFILE_MARKER_FILE))
        and os.path.isdir(os.path.join(profile_dir, PROFILE_DEFAULT_DIR))
    )


def prewarm(
    executable: Optional[str],
    profile_dir: str,
    deadline: float = PREWARM_DEADLINE_SECS,
    interval: float = PREWARM_POLL_INTERVAL_SECS,
    port: int = PREWARM_DEBUG_PORT,
    terminate_timeout: float = PREWARM_TERMINATE_TIMEOUT_SECS,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> PrewarmOutcome:
    """
    Launch Chromium against profile_dir until it has written its profile state.

    Skips without spawning anything when no executable is available or the
    marker file already exists, so container restarts stay fast. Otherwise
    polls every `interval` seconds for the marker file and default profile
    directory, giving up after `deadline` seconds. The Chromium process tree
    is terminated before returning in every case.

    Args:
        executable: Chromium binary, or None if none was found
        profile_dir: User-data dir to initialise
        deadline: Maximum seconds to wait for the profile state
        interval: Seconds between checks
        port: Remote debugging port passed to Chromium
        terminate_timeout: Grace period for SIGTERM before SIGKILL
        sleep: Sleep function (injectable for tests)
        clock: Monotonic clock (injectable for tests)

    Returns:
        PrewarmOutcome: SUCCESS, TIMED_OUT, or SKIPPED with a reason
    """
    if not is_executable_file(executable):
        return PrewarmOutcome(PrewarmStatus.SKIPPED, reason="no Chromium executable available")

    if os.path.isfile(os.path.join(profile_dir, PROFILE_MARKER_FILE)):
        return PrewarmOutcome(PrewarmStatus.SKIPPED, reason="Chromium profile already exists")

    try:
        os.makedirs(profile_dir, exist_ok=True)
    except OSError as e:
        return PrewarmOutcome(PrewarmStatus.SKIPPED, reason=f"cannot create {profile_dir}: {e}")

    logger.info("Pre-warming Chromium profile in %s", profile_dir)

    cmd = build_prewarm_command(executable, profile_dir, port=port)
    try:
        proc = launch_chrome_process(cmd)
    except OSError as e:
        return PrewarmOutcome(PrewarmStatus.SKIPPED, reason=f"failed to launch {executable}: {e}")

    started = clock()
    status = PrewarmStatus.TIMED_OUT
    try:
        while clock() - started < deadline:
            if profile_initialized(profile_dir):
                status = PrewarmStatus.SUCCESS
                break
            sleep(interval)
        else:
            # Last look in case the files landed during the final sleep.
            if profile_initialized(profile_dir):
                status = PrewarmStatus.SUCCESS
        elapsed = clock() - started
    finally:
        terminate_process_tree(proc, timeout=terminate_timeout)

    if status is PrewarmStatus.SUCCESS:
        reason = "profile state written"
    else:
        reason = f"no profile state after {deadline:g}s"
    return PrewarmOutcome(status, reason=reason, elapsed=elapsed, pid=proc.pid)


__all__ = [
    "PrewarmStatus",
    "PrewarmOutcome",
    "profile_initialized",
    "prewarm",
]
