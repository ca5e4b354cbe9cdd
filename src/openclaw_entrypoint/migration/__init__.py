"""Idempotent migration of the persisted OpenClaw config."""

from .engine import MigrationResult, apply_rules, migrate
from .rules import DEFAULT_RULES, MigrationContext, PatchRule, mask_secret

__all__ = [
    "MigrationResult",
    "apply_rules",
    "migrate",
    "DEFAULT_RULES",
    "MigrationContext",
    "PatchRule",
    "mask_secret",
]
