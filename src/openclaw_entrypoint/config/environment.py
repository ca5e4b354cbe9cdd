"""Environment snapshot captured once at boot."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from ..constants import ENV_BROWSERS_PATH, ENV_GATEWAY_TOKEN, ENV_STATE_DIR

import logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnvironmentSnapshot:
    """
    Read-only view of the environment variables the boot sequence depends on.

    Captured once, after the storage/PATH preparation has exported its
    variables, and passed explicitly to everything that needs it. Nothing
    downstream reads os.environ directly.

    Attributes:
        home: Home directory of the invoking user
        state_dir_override: Value of OPENCLAW_STATE_DIR, if set and non-blank
        gateway_token: Value of OPENCLAW_GATEWAY_TOKEN, if set and non-blank
        browsers_root: Value of PLAYWRIGHT_BROWSERS_PATH, if set and non-blank
    """

    home: str
    state_dir_override: Optional[str] = None
    gateway_token: Optional[str] = None
    browsers_root: Optional[str] = None


def _clean(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


def capture_environment(environ: Optional[Mapping[str, str]] = None) -> EnvironmentSnapshot:
    """
    Build an EnvironmentSnapshot from `environ` (defaults to os.environ).

    Blank values are treated the same as unset ones.
    """
    if environ is None:
        environ = os.environ

    home = _clean(environ.get("HOME")) or str(Path.home())

    snapshot = EnvironmentSnapshot(
        home=home,
        state_dir_override=_clean(environ.get(ENV_STATE_DIR)),
        gateway_token=_clean(environ.get(ENV_GATEWAY_TOKEN)),
        browsers_root=_clean(environ.get(ENV_BROWSERS_PATH)),
    )
    logger.debug(
        "Environment captured: home=%s state_dir_override=%s token_set=%s browsers_root=%s",
        snapshot.home,
        snapshot.state_dir_override,
        snapshot.gateway_token is not None,
        snapshot.browsers_root,
    )
    return snapshot


__all__ = [
    "EnvironmentSnapshot",
    "capture_environment",
]
