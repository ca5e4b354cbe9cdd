"""Chromium executable discovery inside a Playwright browsers root."""

import os
from typing import Mapping, Optional

from ..constants import (
    CHROMIUM_CANDIDATE_PATHS,
    CHROMIUM_DIR_PREFIX,
    DEFAULT_CHROMIUM_PATH,
    ENV_CHROMIUM_PATH,
)

import logging
logger = logging.getLogger(__name__)


def find_chromium_install_dir(browsers_root: str) -> Optional[str]:
    """
    Return the first chromium-* subdirectory of browsers_root (sorted by name).

    Raises:
        OSError: If browsers_root cannot be listed
    """
    for name in sorted(os.listdir(browsers_root)):
        if name.startswith(CHROMIUM_DIR_PREFIX) and os.path.isdir(os.path.join(browsers_root, name)):
            return os.path.join(browsers_root, name)
    return None


def discover_chromium_executable(browsers_root: Optional[str]) -> Optional[str]:
    """
    Locate the Playwright Chromium binary under browsers_root.

    Playwright installs Chromium as ms-playwright/chromium-XXXX/ with either a
    full browser (chrome) or a headless shell (headless_shell) under
    chrome-linux64/ or chrome-linux/. The candidates in
    CHROMIUM_CANDIDATE_PATHS are probed in order.

    Args:
        browsers_root: Playwright browsers root, or None if not configured

    Returns:
        Optional[str]: Path to the first candidate that is a regular file, or None.
        Never raises; a missing browser is a normal outcome.
    """
    if not browsers_root:
        logger.info("No browsers root configured; skipping Chromium discovery")
        return None

    if not os.path.isdir(browsers_root):
        logger.info("Browsers root %s does not exist; skipping Chromium discovery", browsers_root)
        return None

    try:
        install_dir = find_chromium_install_dir(browsers_root)
    except OSError as e:
        logger.warning("Error finding Playwright Chromium in %s: %s", browsers_root, e)
        return None

    if install_dir is None:
        logger.info("No %s* directory under %s", CHROMIUM_DIR_PREFIX, browsers_root)
        return None

    for parts in CHROMIUM_CANDIDATE_PATHS:
        candidate = os.path.join(install_dir, *parts)
        if os.path.isfile(candidate):
            logger.info("Found Playwright Chromium: %s", candidate)
            return candidate

    logger.info("Chromium install dir %s holds no known executable layout", install_dir)
    return None


def is_executable_file(path: Optional[str]) -> bool:
    """Return True if path is a regular file the current user may execute."""
    return bool(path) and os.path.isfile(path) and os.access(path, os.X_OK)


def resolve_prewarm_executable(
    discovered: Optional[str],
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """
    Pick the binary used to pre-warm the browser profile.

    Prefers the discovered Playwright binary and falls back to the image-level
    Chromium link (OPENCLAW_CHROMIUM_PATH, default /usr/bin/chromium).

    Returns:
        Optional[str]: An executable path, or None if neither is usable
    """
    if environ is None:
        environ = os.environ

    if is_executable_file(discovered):
        return discovered

    fallback = (environ.get(ENV_CHROMIUM_PATH) or "").strip() or DEFAULT_CHROMIUM_PATH
    if is_executable_file(fallback):
        return fallback

    return None


__all__ = [
    "find_chromium_install_dir",
    "discover_chromium_executable",
    "is_executable_file",
    "resolve_prewarm_executable",
]
