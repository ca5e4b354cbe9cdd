import stat
import sys
from pathlib import Path

import pytest

# Add src to path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from openclaw_entrypoint.config.environment import EnvironmentSnapshot
from openclaw_entrypoint.migration.rules import MigrationContext


@pytest.fixture
def make_ctx(tmp_path):
    """Build a MigrationContext without touching the real environment."""
    def _make(gateway_token=None, browsers_root=None, browser_executable=None):
        env = EnvironmentSnapshot(
            home=str(tmp_path / "home"),
            gateway_token=gateway_token,
            browsers_root=browsers_root,
        )
        return MigrationContext(env=env, browser_executable=browser_executable)
    return _make


@pytest.fixture
def make_script(tmp_path):
    """Write an executable /bin/sh script and return its path."""
    def _make(body: str, name: str = "fake-chromium") -> str:
        path = tmp_path / name
        path.write_text("#!/bin/sh\n" + body)
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(path)
    return _make
