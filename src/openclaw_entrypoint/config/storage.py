"""Persistent volume and process-environment preparation."""

import os
import shutil
from typing import MutableMapping, Optional

from ..constants import (
    ENV_BROWSERS_PATH,
    NPM_GLOBAL_DIR_NAME,
    PLAYWRIGHT_CACHE_SUBDIR,
    STATE_DIR_NAME,
)

import logging
logger = logging.getLogger(__name__)


def link_persistent_storage(data_root: str, home: str) -> bool:
    """
    Point <home>/.openclaw at <data_root>/.openclaw when the volume holds one.

    Whatever currently sits at <home>/.openclaw (directory, file or stale link)
    is removed first. A link that already points at the volume is left alone.

    Returns:
        bool: True if a new link was created
    """
    target = os.path.join(data_root, STATE_DIR_NAME)
    link = os.path.join(home, STATE_DIR_NAME)

    if not os.path.isdir(target):
        return False

    if os.path.islink(link) and os.path.realpath(link) == os.path.realpath(target):
        logger.debug("Persistent storage already linked: %s -> %s", target, link)
        return False

    if os.path.islink(link) or os.path.isfile(link):
        os.unlink(link)
    elif os.path.isdir(link):
        shutil.rmtree(link)

    os.makedirs(home, exist_ok=True)
    os.symlink(target, link)
    logger.info("Linked persistent storage: %s -> %s", target, link)
    return True


def configure_skills_path(data_root: str, environ: MutableMapping[str, str]) -> bool:
    """
    Put globally installed npm skills on PATH when the volume provides them.

    Returns:
        bool: True if the npm-global bin directory was found
    """
    prefix = os.path.join(data_root, NPM_GLOBAL_DIR_NAME)
    bin_dir = os.path.join(prefix, "bin")
    if not os.path.isdir(bin_dir):
        return False

    path_entries = [p for p in environ.get("PATH", "").split(os.pathsep) if p]
    if bin_dir not in path_entries:
        environ["PATH"] = os.pathsep.join([bin_dir] + path_entries)
    environ["NPM_CONFIG_PREFIX"] = prefix
    logger.info("Added skills to PATH: %s", bin_dir)
    return True


def configure_playwright_browsers(home: str, environ: MutableMapping[str, str]) -> Optional[str]:
    """
    Export PLAYWRIGHT_BROWSERS_PATH when browsers were baked into the image.

    An explicit PLAYWRIGHT_BROWSERS_PATH is never overridden.

    Returns:
        Optional[str]: The browsers root in effect, if any
    """
    existing = (environ.get(ENV_BROWSERS_PATH) or "").strip()
    if existing:
        return existing

    cache_dir = os.path.join(home, PLAYWRIGHT_CACHE_SUBDIR)
    if not os.path.isdir(cache_dir):
        return None

    environ[ENV_BROWSERS_PATH] = cache_dir
    logger.info("Playwright browsers found at: %s", cache_dir)
    return cache_dir


__all__ = [
    "link_persistent_storage",
    "configure_skills_path",
    "configure_playwright_browsers",
]
