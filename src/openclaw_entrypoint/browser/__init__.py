"""Chromium discovery, launch, and profile pre-warming."""

from .chrome_executable import (
    discover_chromium_executable,
    resolve_prewarm_executable,
)
from .profile_prewarm import (
    PrewarmStatus,
    PrewarmOutcome,
    prewarm,
)

__all__ = [
    "discover_chromium_executable",
    "resolve_prewarm_executable",
    "PrewarmStatus",
    "PrewarmOutcome",
    "prewarm",
]
