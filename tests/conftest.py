from __future__ import annotations

import sys
from pathlib import Path

import pytest
import respx
from typer.testing import CliRunner


# Ensure the repository-local ``src`` directory is importable when the project is
# not installed as a package.
SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from nrclient.config import ClientConfig  # noqa: E402


@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig(personal_api_key="user-key", admin_api_key="admin-key")


@pytest.fixture
def respx_mock():
    with respx.mock(assert_all_called=False) as respx_mgr:
        yield respx_mgr


@pytest.fixture
def cli_runner(monkeypatch, tmp_path):
    """Provide a CLI runner with a dummy API key and an isolated config file."""

    monkeypatch.setenv("NEW_RELIC_API_KEY", "test-key")
    monkeypatch.delenv("NEW_RELIC_ADMIN_API_KEY", raising=False)
    monkeypatch.delenv("NEW_RELIC_REGION", raising=False)
    monkeypatch.delenv("NEW_RELIC_ACCOUNT_ID", raising=False)
    monkeypatch.setattr("nrclient.config.CONFIG_PATH", str(tmp_path / "config.json"))
    return CliRunner()
