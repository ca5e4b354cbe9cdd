"""Environment, path, and persistent storage configuration."""

from .environment import (
    EnvironmentSnapshot,
    capture_environment,
)

from .paths import (
    resolve_state_dir,
    config_file_path,
    browser_user_data_dir,
)

from .storage import (
    link_persistent_storage,
    configure_skills_path,
    configure_playwright_browsers,
)

__all__ = [
    "EnvironmentSnapshot",
    "capture_environment",
    "resolve_state_dir",
    "config_file_path",
    "browser_user_data_dir",
    "link_persistent_storage",
    "configure_skills_path",
    "configure_playwright_browsers",
]
