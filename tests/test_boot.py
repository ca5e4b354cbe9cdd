"""End-to-end boot sequence and hand-off."""

import json
import os

import pytest

import openclaw_entrypoint.__main__ as entry
from openclaw_entrypoint import boot
from openclaw_entrypoint.boot import prewarm_deadline, prewarm_disabled, run_boot_sequence
from openclaw_entrypoint.browser.profile_prewarm import PrewarmOutcome, PrewarmStatus


@pytest.fixture
def container(tmp_path):
    """A fake container filesystem: home, persistent volume, Playwright cache."""
    home = tmp_path / "home"
    home.mkdir()
    data = tmp_path / "data"
    environ = {
        "HOME": str(home),
        "PATH": "/usr/bin:/bin",
        "OPENCLAW_DATA_ROOT": str(data),
        "OPENCLAW_CHROMIUM_PATH": str(tmp_path / "no-chromium"),
    }
    return {"home": home, "data": data, "environ": environ}


def _write_config(state_dir, doc):
    state_dir.mkdir(parents=True, exist_ok=True)
    path = state_dir / "openclaw.json"
    path.write_text(json.dumps(doc))
    return path


def test_fresh_container_without_config(container):
    report = run_boot_sequence(container["environ"])

    assert report.config_file == os.path.join(str(container["home"]), ".openclaw", "openclaw.json")
    assert report.migration.found is False
    assert report.browser_executable is None
    assert report.prewarm.status is PrewarmStatus.SKIPPED


def test_config_on_persistent_volume_is_migrated(container):
    config = _write_config(container["data"] / ".openclaw", {"gateway": {"auth": {"token": "old"}}})
    container["environ"]["OPENCLAW_GATEWAY_TOKEN"] = "from-env-token"

    report = run_boot_sequence(container["environ"])

    assert (container["home"] / ".openclaw").is_symlink()
    assert report.migration.changed is True
    written = json.loads(config.read_text())
    assert written["gateway"]["auth"] == {"token": "from-env-token", "mode": "token"}
    assert written["agents"]["defaults"]["sandbox"]["mode"] == "off"


def test_playwright_chromium_is_discovered_and_recorded(container):
    chrome = container["home"] / ".cache" / "ms-playwright" / "chromium-1155" / "chrome-linux64" / "chrome"
    chrome.parent.mkdir(parents=True)
    chrome.write_text("")
    config = _write_config(container["home"] / ".openclaw", {})

    # Keep the fake binary non-executable so no subprocess is launched.
    report = run_boot_sequence(container["environ"])

    assert container["environ"]["PLAYWRIGHT_BROWSERS_PATH"].endswith("ms-playwright")
    assert report.browser_executable == str(chrome)
    written = json.loads(config.read_text())
    assert written["browser"]["executablePath"] == str(chrome)
    assert written["browser"]["defaultProfile"] == "openclaw"
    assert report.prewarm.status is PrewarmStatus.SKIPPED


def test_state_dir_override(container, tmp_path):
    state = tmp_path / "custom-state"
    config = _write_config(state, {})
    container["environ"]["OPENCLAW_STATE_DIR"] = str(state)

    report = run_boot_sequence(container["environ"])

    assert report.config_file == str(config)
    assert report.migration.changed is True


def test_failing_step_does_not_stop_boot(container, monkeypatch, caplog):
    def boom(root):
        raise RuntimeError("unexpected")

    monkeypatch.setattr(boot, "discover_chromium_executable", boom)
    config = _write_config(container["home"] / ".openclaw", {})

    report = run_boot_sequence(container["environ"])

    assert "discover Chromium" in caplog.text
    assert report.browser_executable is None
    assert report.migration.changed is True
    assert json.loads(config.read_text())["gateway"]["trustedProxies"]


def test_malformed_config_does_not_stop_boot(container):
    config = container["home"] / ".openclaw" / "openclaw.json"
    config.parent.mkdir(parents=True)
    config.write_text("{not json")

    report = run_boot_sequence(container["environ"])

    assert report.migration.error
    assert report.prewarm is not None
    assert config.read_text() == "{not json"


def test_prewarm_can_be_disabled(container, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("pre-warm must not run")

    monkeypatch.setattr(boot, "prewarm", fail)
    container["environ"]["OPENCLAW_SKIP_PREWARM"] = "1"

    report = run_boot_sequence(container["environ"])

    assert report.prewarm is None


def test_prewarm_deadline_from_environ(container, monkeypatch):
    seen = []

    def fake_prewarm(executable, profile_dir, deadline):
        seen.append(deadline)
        return PrewarmOutcome(PrewarmStatus.SKIPPED, reason="not launched")

    monkeypatch.setattr(boot, "prewarm", fake_prewarm)
    container["environ"]["OPENCLAW_PREWARM_DEADLINE"] = "3"

    run_boot_sequence(container["environ"])

    assert seen == [3.0]


def test_invalid_prewarm_deadline_does_not_stop_boot(container, monkeypatch, caplog):
    seen = []

    def fake_prewarm(executable, profile_dir, deadline):
        seen.append(deadline)
        return PrewarmOutcome(PrewarmStatus.SKIPPED, reason="not launched")

    monkeypatch.setattr(boot, "prewarm", fake_prewarm)
    container["environ"]["OPENCLAW_PREWARM_DEADLINE"] = "15s"

    report = run_boot_sequence(container["environ"])

    assert seen == [15.0]
    assert report.prewarm.status is PrewarmStatus.SKIPPED
    assert "OPENCLAW_PREWARM_DEADLINE" in caplog.text


class TestPrewarmSettings:

    @pytest.mark.parametrize("value, expected", [
        ("1", True),
        (" 1 ", True),
        ("0", False),
        ("true", False),
        ("", False),
    ])
    def test_disabled_flag(self, value, expected):
        assert prewarm_disabled({"OPENCLAW_SKIP_PREWARM": value}) is expected

    def test_disabled_flag_missing(self):
        assert prewarm_disabled({}) is False

    def test_deadline_default(self):
        assert prewarm_deadline({}) == 15.0

    def test_deadline_override(self):
        assert prewarm_deadline({"OPENCLAW_PREWARM_DEADLINE": "2.5"}) == 2.5

    @pytest.mark.parametrize("value", ["15s", "0", "-4", "nan", "inf"])
    def test_invalid_deadline_falls_back(self, value, caplog):
        assert prewarm_deadline({"OPENCLAW_PREWARM_DEADLINE": value}) == 15.0
        assert "Ignoring invalid OPENCLAW_PREWARM_DEADLINE" in caplog.text


class TestHandOff:

    def test_no_command(self):
        assert entry.hand_off([]) == 0

    def test_exec_replaces_process(self, monkeypatch):
        calls = []
        monkeypatch.setattr(entry.os, "execvp", lambda file, args: calls.append((file, args)))
        entry.hand_off(["node", "openclaw.mjs", "gateway"])
        assert calls == [("node", ["node", "openclaw.mjs", "gateway"])]

    def test_missing_command(self, monkeypatch):
        def not_found(file, args):
            raise FileNotFoundError(2, "No such file or directory")

        monkeypatch.setattr(entry.os, "execvp", not_found)
        assert entry.hand_off(["does-not-exist"]) == 127

    def test_main_runs_boot_then_execs(self, monkeypatch):
        order = []
        monkeypatch.setattr(entry, "run_boot_sequence", lambda: order.append("boot"))
        monkeypatch.setattr(entry.os, "execvp", lambda file, args: order.append(("exec", file, args)))

        entry.main(["node", "openclaw.mjs"])

        assert order == ["boot", ("exec", "node", ["node", "openclaw.mjs"])]

    def test_dotenv_settings_reach_boot(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("OPENCLAW_SKIP_PREWARM=1\nOPENCLAW_PREWARM_DEADLINE=4\n")
        monkeypatch.chdir(tmp_path)
        for name in ("OPENCLAW_SKIP_PREWARM", "OPENCLAW_PREWARM_DEADLINE"):
            # setenv first so monkeypatch removes whatever .env loads.
            monkeypatch.setenv(name, "unset")
            monkeypatch.delenv(name)

        seen = {}

        def fake_boot():
            seen["disabled"] = prewarm_disabled(os.environ)
            seen["deadline"] = prewarm_deadline(os.environ)

        monkeypatch.setattr(entry, "run_boot_sequence", fake_boot)
        monkeypatch.setattr(entry.os, "execvp", lambda file, args: None)

        entry.main(["node"])

        assert seen == {"disabled": True, "deadline": 4.0}
