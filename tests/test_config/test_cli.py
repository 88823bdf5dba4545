"""Tests for command-line configuration and the run-once mode."""

import json

import pytest

from impala_exporter import main as main_module
from impala_exporter.main import ExporterApp, build_config, parse_args
from impala_exporter.config.models import ExporterConfig
from impala_exporter.config.settings import Settings

from conftest import jmx_body, make_transport


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("NODE_IP", "IMPALA_PORT", "PORT", "NUM_WORKERS",
                 "SCRAPE_TIMEOUT", "LOG_LEVEL", "IMPALA_EXPORTER_CONFIG"):
        monkeypatch.delenv(name, raising=False)


def test_build_config_defaults():
    config = build_config(parse_args([]))

    assert config == ExporterConfig()


def test_flags_override_environment(monkeypatch):
    """Test CLI flags take precedence over environment variables."""
    monkeypatch.setenv("NODE_IP", "10.0.0.1")
    monkeypatch.setenv("NUM_WORKERS", "2")

    config = build_config(parse_args(["--workers", "6", "--port", "9999"]))

    assert config.nodes == ["10.0.0.1"]
    assert config.num_workers == 6
    assert config.exporter_port == 9999


def test_config_file_then_environment(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("nodes: [10.2.0.1]\nexporter_port: 9500\n")
    monkeypatch.setenv("PORT", "9600")

    config = build_config(parse_args(["--config", str(path)]))

    assert config.nodes == ["10.2.0.1"]
    assert config.exporter_port == 9600


def test_invalid_configuration_exits_nonzero():
    assert main_module.main(["--workers", "-1", "--run-once"]) == 1


def test_render_once(scenario_a_bean, logger):
    """Test one cycle renders the exposition text."""
    app = ExporterApp(ExporterConfig(nodes=["10.0.0.1"]), logger)
    app.coordinator.transport = make_transport({"10.0.0.1": jmx_body(scenario_a_bean)})

    text = app.render_once().decode()

    assert "impala_jmx_totalUsedAfterGc{" in text
    assert " 30.0" in text


def test_bind_failure_exits_nonzero(monkeypatch):
    """Test failing to bind the listen port is fatal."""
    def refuse(*args, **kwargs):
        raise OSError("address already in use")

    monkeypatch.setattr(main_module, "start_http_server", refuse)

    assert main_module.main(["--nodes", "10.0.0.1", "--port", "9206"]) == 1


def test_invalid_configuration_logged_as_json(capsys):
    """Test startup configuration errors use the structured log format."""
    assert main_module.main(["--workers", "0", "--run-once"]) == 1

    lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
    record = json.loads(lines[-1])
    assert record["levelname"] == "ERROR"
    assert record["message"].startswith("Invalid configuration")
    assert record["error_type"] == "ValidationError"


def test_settings_config_path(monkeypatch):
    monkeypatch.setenv("IMPALA_EXPORTER_CONFIG", "/etc/impala-exporter.yaml")

    assert Settings.config_path() == "/etc/impala-exporter.yaml"
