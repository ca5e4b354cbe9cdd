"""Config migration: load, apply patch rules, persist only on change."""

import os
from dataclasses import dataclass
from typing import Optional, Sequence

from .document import load_document, write_document_atomic
from .rules import DEFAULT_RULES, MigrationContext, PatchRule

import logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MigrationResult:
    """
    Attributes:
        changed: True if any rule modified the document (and it was written)
        error: Message describing a read/parse/write failure, if any
        found: False if the config file does not exist yet
    """

    changed: bool = False
    error: Optional[str] = None
    found: bool = True


def apply_rules(doc: dict, ctx: MigrationContext, rules: Sequence[PatchRule] = DEFAULT_RULES) -> bool:
    """
    Apply every rule in order to `doc` in place.

    Returns:
        bool: True if at least one rule changed the document
    """
    changed = False
    for rule in rules:
        if rule.apply(doc, ctx):
            logger.debug("Rule %s applied", rule.name)
            changed = True
    return changed


def migrate(
    config_file: str,
    ctx: MigrationContext,
    rules: Sequence[PatchRule] = DEFAULT_RULES,
) -> MigrationResult:
    """
    Bring the config file at `config_file` up to date.

    A missing file is a normal state (the host application has not run yet).
    A file that cannot be read or parsed is left untouched and reported via
    `error`; this function never raises for such problems, since a broken
    config is the host application's concern and must not block boot.
    The file is only rewritten when a rule changed something.
    """
    if not os.path.isfile(config_file):
        logger.info("Config file not found at %s, skipping fix", config_file)
        return MigrationResult(changed=False, found=False)

    try:
        doc = load_document(config_file)
    except (OSError, ValueError) as e:
        logger.error("Config check error: %s", e)
        return MigrationResult(changed=False, error=str(e))

    if not apply_rules(doc, ctx, rules):
        logger.info("Config OK: no changes needed")
        return MigrationResult(changed=False)

    try:
        write_document_atomic(config_file, doc)
    except OSError as e:
        logger.error("Config write error: %s", e)
        return MigrationResult(changed=False, error=str(e))

    logger.info("Config updated successfully")
    return MigrationResult(changed=True)


__all__ = [
    "MigrationResult",
    "apply_rules",
    "migrate",
]
