#region Overview
"""
Container entrypoint for the OpenClaw gateway.

Usage:
    python -m openclaw_entrypoint node openclaw.mjs gateway --allow-unconfigured --bind lan

Runs the boot sequence (persistent storage, config migration, Chromium
profile pre-warm) and then replaces itself with the given command. Nothing
in the boot sequence can stop the gateway from starting: a degraded browser
feature is better than a service that does not come up.
"""
#endregion

#region Imports
import os
import sys
import logging
from typing import Optional, Sequence

from dotenv import load_dotenv, find_dotenv

from .boot import run_boot_sequence
#endregion

#region Logger
logger = logging.getLogger(__name__)
#endregion


def configure_logging() -> None:
    level_name = os.getenv("OPENCLAW_ENTRYPOINT_LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s [%(levelname)s] [entrypoint] %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )


def hand_off(command: Sequence[str]) -> int:
    """
    Replace the current process with `command`.

    Only returns when there is nothing to run or exec fails; the return value
    is then the exit status, following shell conventions (127 not found,
    126 not executable).
    """
    if not command:
        logger.info("No command given; boot sequence finished")
        return 0

    logger.info("Starting OpenClaw gateway: %s", " ".join(command))
    for handler in logging.getLogger().handlers:
        handler.flush()
    try:
        os.execvp(command[0], list(command))
    except FileNotFoundError as e:
        logger.error("Cannot start %s: %s", command[0], e)
        return 127
    except OSError as e:
        logger.error("Cannot start %s: %s", command[0], e)
        return 126
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    # The container environment wins over a local .env file.
    load_dotenv(find_dotenv(filename=".env", usecwd=True), override=False)
    configure_logging()

    run_boot_sequence()
    return hand_off(argv)


if __name__ == "__main__":
    sys.exit(main())
