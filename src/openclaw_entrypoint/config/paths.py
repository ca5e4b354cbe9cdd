"""Path utilities for the OpenClaw state directory."""

import os

from .environment import EnvironmentSnapshot
from ..constants import APP_NAME, CONFIG_FILE_NAME, STATE_DIR_NAME


def resolve_state_dir(snapshot: EnvironmentSnapshot) -> str:
    """
    Get the state directory path.

    Uses OPENCLAW_STATE_DIR if set, otherwise <home>/.openclaw.
    Pure path computation; nothing is created.
    """
    if snapshot.state_dir_override:
        return snapshot.state_dir_override
    return os.path.join(snapshot.home, STATE_DIR_NAME)


def config_file_path(state_dir: str) -> str:
    """Get the path to the host application's JSON config."""
    return os.path.join(state_dir, CONFIG_FILE_NAME)


def browser_user_data_dir(state_dir: str) -> str:
    """Get the Chromium user-data dir the host application's browser tool uses."""
    return os.path.join(state_dir, "browser", APP_NAME, "user-data")


__all__ = [
    "resolve_state_dir",
    "config_file_path",
    "browser_user_data_dir",
]
