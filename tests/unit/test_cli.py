"""Tests for the grokproxy command line."""

import pytest
from typer.testing import CliRunner

from grok_proxy import __version__
from grok_proxy.cli.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    # Rich wraps table cells to the terminal width
    monkeypatch.setenv("COLUMNS", "200")


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_config_show_masks_api_key(monkeypatch):
    monkeypatch.setenv("GROK_API_KEY", "sk-very-secret")
    monkeypatch.setenv("PORT", "4000")

    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 0
    assert "sk-very-secret" not in result.stdout
    assert "sha256:" in result.stdout
    assert "4000" in result.stdout


def test_config_show_rejects_invalid_environment(monkeypatch):
    monkeypatch.setenv("PORT", "not-a-port")
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 1
    assert "PORT" in result.stdout


def test_config_env_lists_variables():
    result = runner.invoke(app, ["config", "env"])
    assert result.exit_code == 0
    assert "GROK_API_BASE" in result.stdout
    assert "STREAMING_ENABLED" in result.stdout


def test_start_runs_uvicorn_with_overrides(monkeypatch):
    calls = {}

    def fake_run(app_path, **kwargs):
        calls["app"] = app_path
        calls.update(kwargs)

    monkeypatch.setattr("grok_proxy.cli.commands.start.uvicorn.run", fake_run)
    monkeypatch.setattr(
        "grok_proxy.cli.commands.start.configure_root_logging", lambda level: None
    )

    result = runner.invoke(app, ["start", "--port", "3100"])

    assert result.exit_code == 0
    assert calls["app"] == "grok_proxy.main:app"
    assert calls["port"] == 3100
    assert calls["host"] == "0.0.0.0"
    assert calls["reload"] is False
