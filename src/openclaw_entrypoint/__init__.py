"""
Boot-time reconciliation for the OpenClaw gateway container.

Runs once per container start, before the gateway process is exec'd:

1. links the persistent volume into the state directory and exports the
   PATH and Playwright variables the gateway expects,
2. migrates the persisted openclaw.json through a list of idempotent patch
   rules (deprecated keys, Control UI flags, trusted proxies, the gateway
   token from the environment, sandbox and browser settings),
3. pre-warms a Chromium profile so the first browser tool call does not
   have to bootstrap one.

No step may stop the gateway from starting. Missing files and browsers are
normal states; malformed config is logged and left for the gateway to
report; the pre-warm has a hard deadline and always cleans up its process.
"""

from .boot import BootReport, run_boot_sequence

__all__ = ["BootReport", "run_boot_sequence"]
