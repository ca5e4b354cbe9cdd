"""
Global constants and configuration defaults.
No dependencies - safe to import from anywhere.
"""

import os

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_STATE_DIR = "OPENCLAW_STATE_DIR"
"""Overrides the state directory (default: ~/.openclaw)."""

ENV_GATEWAY_TOKEN = "OPENCLAW_GATEWAY_TOKEN"
"""Gateway access token synced into the config file."""

ENV_BROWSERS_PATH = "PLAYWRIGHT_BROWSERS_PATH"
"""Root directory holding Playwright-installed browsers."""

ENV_DATA_ROOT = "OPENCLAW_DATA_ROOT"
"""Mount point of the persistent volume (default: /data)."""

ENV_CHROMIUM_PATH = "OPENCLAW_CHROMIUM_PATH"
"""Fallback Chromium binary used for pre-warming when discovery finds nothing."""

ENV_PREWARM_DEADLINE = "OPENCLAW_PREWARM_DEADLINE"
"""Overrides the pre-warm deadline in seconds."""

ENV_SKIP_PREWARM = "OPENCLAW_SKIP_PREWARM"
"""Set to 1 to disable the pre-warm step entirely."""


# ============================================================================
# Filesystem Layout
# ============================================================================

APP_NAME = "openclaw"
STATE_DIR_NAME = f".{APP_NAME}"
CONFIG_FILE_NAME = f"{APP_NAME}.json"

DEFAULT_DATA_ROOT = "/data"
DEFAULT_CHROMIUM_PATH = "/usr/bin/chromium"

PLAYWRIGHT_CACHE_SUBDIR = os.path.join(".cache", "ms-playwright")
NPM_GLOBAL_DIR_NAME = "npm-global"


# ============================================================================
# Config Migration Values
# ============================================================================

TRUSTED_PROXY_CIDRS = ("10.0.0.0/8", "172.16.0.0/12")
"""Private ranges the platform's reverse proxy connects from."""

SANDBOX_MODE_OFF = "off"
AUTH_MODE_TOKEN = "token"
BROWSER_DEFAULT_PROFILE = APP_NAME

SECRET_PREFIX_CHARS = 8
"""Upper bound on how many leading characters of a secret may be logged."""


# ============================================================================
# Browser Discovery
# ============================================================================

CHROMIUM_DIR_PREFIX = "chromium-"

CHROMIUM_CANDIDATE_PATHS = (
    ("chrome-linux64", "chrome"),
    ("chrome-linux", "chrome"),
    ("chrome-linux64", "headless_shell"),
    ("chrome-linux", "headless_shell"),
    ("chrome",),
)
"""Relative paths probed in order inside a chromium-* install directory."""


# ============================================================================
# Profile Pre-warm
# ============================================================================

PREWARM_DEADLINE_SECS = 15.0
"""How long to wait for Chromium to write its profile state (OPENCLAW_PREWARM_DEADLINE overrides)."""

PREWARM_POLL_INTERVAL_SECS = 1.0
"""Sleep between checks for the profile marker files."""

PREWARM_TERMINATE_TIMEOUT_SECS = 5.0
"""Grace period after SIGTERM before the pre-warm process tree is killed."""

PREWARM_DEBUG_PORT = 18800
"""Remote debugging port the host application's browser launcher expects."""

PROFILE_MARKER_FILE = "Local State"
PROFILE_DEFAULT_DIR = "Default"


__all__ = [
    "ENV_STATE_DIR",
    "ENV_GATEWAY_TOKEN",
    "ENV_BROWSERS_PATH",
    "ENV_DATA_ROOT",
    "ENV_CHROMIUM_PATH",
    "ENV_PREWARM_DEADLINE",
    "ENV_SKIP_PREWARM",
    "APP_NAME",
    "STATE_DIR_NAME",
    "CONFIG_FILE_NAME",
    "DEFAULT_DATA_ROOT",
    "DEFAULT_CHROMIUM_PATH",
    "PLAYWRIGHT_CACHE_SUBDIR",
    "NPM_GLOBAL_DIR_NAME",
    "TRUSTED_PROXY_CIDRS",
    "SANDBOX_MODE_OFF",
    "AUTH_MODE_TOKEN",
    "BROWSER_DEFAULT_PROFILE",
    "SECRET_PREFIX_CHARS",
    "CHROMIUM_DIR_PREFIX",
    "CHROMIUM_CANDIDATE_PATHS",
    "PREWARM_DEADLINE_SECS",
    "PREWARM_POLL_INTERVAL_SECS",
    "PREWARM_TERMINATE_TIMEOUT_SECS",
    "PREWARM_DEBUG_PORT",
    "PROFILE_MARKER_FILE",
    "PROFILE_DEFAULT_DIR",
]
