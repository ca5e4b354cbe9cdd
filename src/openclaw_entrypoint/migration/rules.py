"""
Patch rules applied to the OpenClaw config at boot.

Each rule pairs a precondition (`is_satisfied`) with an effect (`enforce`).
Effects create whatever ancestor objects they need, so every rule converges
to the same fixed point from any document shape, and a satisfied rule never
touches the document.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from .document import ensure_object, get_path, has_path
from ..config.environment import EnvironmentSnapshot
from ..constants import (
    AUTH_MODE_TOKEN,
    BROWSER_DEFAULT_PROFILE,
    SANDBOX_MODE_OFF,
    SECRET_PREFIX_CHARS,
    TRUSTED_PROXY_CIDRS,
)

import logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MigrationContext:
    """
    Inputs rules may depend on besides the document itself.

    Attributes:
        env: Environment snapshot captured at boot
        browser_executable: Discovered Chromium binary, if any
    """

    env: EnvironmentSnapshot
    browser_executable: Optional[str] = None


Predicate = Callable[[dict, MigrationContext], bool]
Effect = Callable[[dict, MigrationContext], None]


@dataclass(frozen=True)
class PatchRule:
    """
    A named, idempotent config patch.

    Attributes:
        name: Stable identifier used in logs and tests
        is_satisfied: Pure check, true when the document needs no change
        enforce: Mutates the document so is_satisfied holds afterwards
        applies: Optional gate; when false the rule is skipped silently
        satisfied_message: Logged when the rule applies but is already satisfied
    """

    name: str
    is_satisfied: Predicate
    enforce: Effect
    applies: Optional[Predicate] = None
    satisfied_message: Optional[str] = None

    def apply(self, doc: dict, ctx: MigrationContext) -> bool:
        """Enforce the rule if needed. Returns True if the document changed."""
        if self.applies is not None and not self.applies(doc, ctx):
            return False
        if self.is_satisfied(doc, ctx):
            if self.satisfied_message:
                logger.info(self.satisfied_message)
            return False
        self.enforce(doc, ctx)
        return True


def mask_secret(value: Optional[str]) -> str:
    """Show at most a short prefix of a secret, never the whole thing."""
    if not value:
        return "(not set)"
    shown = min(SECRET_PREFIX_CHARS, len(value) // 2)
    return value[:shown] + "..."


#region Deprecated keys
def _no_owner_display(doc, ctx):
    return not has_path(doc, "commands", "ownerDisplay")


def _remove_owner_display(doc, ctx):
    del doc["commands"]["ownerDisplay"]
    logger.info("Removed deprecated commands.ownerDisplay")


def _channels_with_streaming(doc):
    channels = doc.get("channels")
    if not isinstance(channels, dict):
        return []
    return [
        name for name, section in channels.items()
        if isinstance(section, dict) and "streaming" in section
    ]


def _no_channel_streaming(doc, ctx):
    return not _channels_with_streaming(doc)


def _remove_channel_streaming(doc, ctx):
    for name in _channels_with_streaming(doc):
        del doc["channels"][name]["streaming"]
        logger.info("Removed deprecated channels.%s.streaming", name)
#endregion


#region Gateway
def _origin_fallback_enabled(doc, ctx):
    return bool(get_path(doc, "gateway", "controlUi", "dangerouslyAllowHostHeaderOriginFallback"))


def _enable_origin_fallback(doc, ctx):
    # Required for non-loopback binding.
    ensure_object(doc, "gateway", "controlUi")["dangerouslyAllowHostHeaderOriginFallback"] = True
    logger.info("Enabled Control UI host-header origin fallback")


def _device_auth_disabled(doc, ctx):
    return bool(get_path(doc, "gateway", "controlUi", "dangerouslyDisableDeviceAuth"))


def _disable_device_auth(doc, ctx):
    # Remote (non-localhost) browsers cannot complete device pairing.
    ensure_object(doc, "gateway", "controlUi")["dangerouslyDisableDeviceAuth"] = True
    logger.info("Disabled Control UI device auth (pairing not required)")


def _trusted_proxies_set(doc, ctx):
    return get_path(doc, "gateway", "trustedProxies") == list(TRUSTED_PROXY_CIDRS)


def _set_trusted_proxies(doc, ctx):
    # Without this, WebSocket connections from the platform proxy are rejected as untrusted.
    ensure_object(doc, "gateway")["trustedProxies"] = list(TRUSTED_PROXY_CIDRS)
    logger.info("Configured trustedProxies: %s", ", ".join(TRUSTED_PROXY_CIDRS))


def _token_from_env(doc, ctx):
    return bool(ctx.env.gateway_token)


def _token_in_sync(doc, ctx):
    env_token = ctx.env.gateway_token
    if not env_token:
        return True
    return get_path(doc, "gateway", "auth", "token") == env_token


def _sync_token(doc, ctx):
    auth = ensure_object(doc, "gateway", "auth")
    old = auth.get("token")
    auth["token"] = ctx.env.gateway_token
    auth["mode"] = AUTH_MODE_TOKEN
    logger.info(
        "Gateway token synced from env var (old: %s, new: %s)",
        mask_secret(old if isinstance(old, str) else None),
        mask_secret(ctx.env.gateway_token),
    )
#endregion


#region Agents sandbox
def _sandbox_off(doc, ctx):
    return get_path(doc, "agents", "defaults", "sandbox", "mode") == SANDBOX_MODE_OFF


def _turn_sandbox_off(doc, ctx):
    # No Docker-in-Docker in the container.
    ensure_object(doc, "agents", "defaults", "sandbox")["mode"] = SANDBOX_MODE_OFF
    logger.info("Sandbox mode disabled")


def _host_control_allowed(doc, ctx):
    return bool(get_path(doc, "agents", "defaults", "sandbox", "browser", "allowHostControl"))


def _allow_host_control(doc, ctx):
    ensure_object(doc, "agents", "defaults", "sandbox", "browser")["allowHostControl"] = True
    logger.info("Browser host control allowed for sandbox sessions")
#endregion


#region Browser automation
def _browsers_installed(doc, ctx):
    return bool(ctx.env.browsers_root)


def _browser_configured(doc, ctx):
    if not ctx.env.browsers_root:
        return True
    browser = get_path(doc, "browser")
    if not isinstance(browser, dict):
        return False
    if not (browser.get("enabled") and browser.get("headless") and browser.get("noSandbox")):
        return False
    if browser.get("defaultProfile") != BROWSER_DEFAULT_PROFILE:
        return False
    if ctx.browser_executable and browser.get("executablePath") != ctx.browser_executable:
        return False
    return True


def _configure_browser(doc, ctx):
    browser = ensure_object(doc, "browser")
    browser["enabled"] = True
    browser["headless"] = True
    browser["noSandbox"] = True
    browser["defaultProfile"] = BROWSER_DEFAULT_PROFILE
    if ctx.browser_executable:
        browser["executablePath"] = ctx.browser_executable
        logger.info("Browser automation enabled (Chromium at: %s)", ctx.browser_executable)
    else:
        logger.info("Browser automation enabled but Chromium executable not found in Playwright dir")
#endregion


REMOVE_COMMANDS_OWNER_DISPLAY = PatchRule("remove-commands-owner-display", _no_owner_display, _remove_owner_display)
REMOVE_CHANNEL_STREAMING = PatchRule("remove-channel-streaming", _no_channel_streaming, _remove_channel_streaming)
CONTROL_UI_ORIGIN_FALLBACK = PatchRule("control-ui-origin-fallback", _origin_fallback_enabled, _enable_origin_fallback)
CONTROL_UI_DISABLE_DEVICE_AUTH = PatchRule("control-ui-disable-device-auth", _device_auth_disabled, _disable_device_auth)
GATEWAY_TRUSTED_PROXIES = PatchRule("gateway-trusted-proxies", _trusted_proxies_set, _set_trusted_proxies)
GATEWAY_TOKEN_SYNC = PatchRule(
    "gateway-token-sync", _token_in_sync, _sync_token,
    applies=_token_from_env,
    satisfied_message="Gateway token already matches env var",
)
SANDBOX_MODE_OFF_RULE = PatchRule("sandbox-mode-off", _sandbox_off, _turn_sandbox_off)
SANDBOX_BROWSER_HOST_CONTROL = PatchRule("sandbox-browser-host-control", _host_control_allowed, _allow_host_control)
BROWSER_AUTOMATION = PatchRule(
    "browser-automation", _browser_configured, _configure_browser,
    applies=_browsers_installed,
    satisfied_message="Browser automation already configured",
)

ENVIRONMENT_RULES = (
    GATEWAY_TOKEN_SYNC,
)

DEFAULT_RULES = (
    REMOVE_COMMANDS_OWNER_DISPLAY,
    REMOVE_CHANNEL_STREAMING,
    CONTROL_UI_ORIGIN_FALLBACK,
    CONTROL_UI_DISABLE_DEVICE_AUTH,
    GATEWAY_TRUSTED_PROXIES,
    *ENVIRONMENT_RULES,
    SANDBOX_MODE_OFF_RULE,
    SANDBOX_BROWSER_HOST_CONTROL,
    BROWSER_AUTOMATION,
)


__all__ = [
    "MigrationContext",
    "PatchRule",
    "mask_secret",
    "REMOVE_COMMANDS_OWNER_DISPLAY",
    "REMOVE_CHANNEL_STREAMING",
    "CONTROL_UI_ORIGIN_FALLBACK",
    "CONTROL_UI_DISABLE_DEVICE_AUTH",
    "GATEWAY_TRUSTED_PROXIES",
    "GATEWAY_TOKEN_SYNC",
    "SANDBOX_MODE_OFF_RULE",
    "SANDBOX_BROWSER_HOST_CONTROL",
    "BROWSER_AUTOMATION",
    "ENVIRONMENT_RULES",
    "DEFAULT_RULES",
]
