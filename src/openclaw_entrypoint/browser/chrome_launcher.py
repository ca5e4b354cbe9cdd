"""Chromium pre-warm command building and launch."""

import subprocess

from ..constants import PREWARM_DEBUG_PORT

import logging
logger = logging.getLogger(__name__)


def build_prewarm_command(
    binary: str,
    user_data_dir: str,
    port: int = PREWARM_DEBUG_PORT,
) -> list[str]:
    """
    Build Chromium command-line arguments for a throwaway headless launch.

    Args:
        binary: Path to Chromium executable
        user_data_dir: Profile directory Chromium should initialise
        port: Remote debugging port

    Returns:
        list[str]: Command-line arguments for Chromium
    """
    return [
        binary,
        "--headless=new",
        "--no-sandbox",
        "--disable-gpu",
        "--disable-dev-shm-usage",
        f"--remote-debugging-port={port}",
        f"--user-data-dir={user_data_dir}",
        "--no-first-run",
        "--no-default-browser-check",
        "about:blank",
    ]


def launch_chrome_process(cmd: list[str]) -> subprocess.Popen:
    """
    Launch Chromium detached from our stdio.

    Raises:
        OSError: If the binary cannot be executed
    """
    proc = subprocess.Popen(
        cmd,
        stdin=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
    )
    logger.debug("Launched %s, pid=%s", cmd[0], proc.pid)
    return proc


__all__ = [
    "build_prewarm_command",
    "launch_chrome_process",
]
