"""CLI commands."""

import json

import pytest
from click.testing import CliRunner

from devpulse import DevPulse
from devpulse.cli import main as cli_main
from devpulse.cli.main import main

from conftest import RecordingFetch

TRACE = "Error: boom\n  at myFn (http://h/app.js:10:5)\n  at http://h/app.js:11:1\n  ???\n"


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setattr(cli_main, "CONFIG_FILE", tmp_path / "config.json")
    for name in ("DEVPULSE_DSN", "DEVPULSE_ENVIRONMENT", "DEVPULSE_RELEASE"):
        monkeypatch.delenv(name, raising=False)
    return CliRunner()


@pytest.fixture
def sent(monkeypatch):
    fetch = RecordingFetch()
    monkeypatch.setattr(cli_main, "DevPulse", lambda: DevPulse(fetch=fetch))
    return fetch


class TestConfigCommands:
    def test_init_saves_config(self, runner):
        result = runner.invoke(main, ["init", "--dsn", "https://x/ingest?key=k", "--environment", "staging"])
        assert result.exit_code == 0
        saved = json.loads(cli_main.CONFIG_FILE.read_text())
        assert saved == {"dsn": "https://x/ingest?key=k", "environment": "staging"}

    def test_status_without_config(self, runner):
        result = runner.invoke(main, ["status"])
        assert result.exit_code == 0
        assert "No DSN configured" in result.output

    def test_status_with_config(self, runner):
        runner.invoke(main, ["init", "--dsn", "https://x/ingest"])
        result = runner.invoke(main, ["status"])
        assert "https://x/ingest" in result.output


class TestParseCommand:
    def test_json_output(self, runner):
        result = runner.invoke(main, ["parse", "--json"], input=TRACE)
        assert result.exit_code == 0
        frames = json.loads(result.output)
        assert frames == [
            {"function": "myFn", "file": "http://h/app.js", "line": 10, "column": 5},
            {"function": None, "file": "http://h/app.js", "line": 11, "column": 1},
            {"raw": "???"},
        ]

    def test_table_output(self, runner, tmp_path):
        trace_file = tmp_path / "trace.txt"
        trace_file.write_text(TRACE)
        result = runner.invoke(main, ["parse", str(trace_file)])
        assert result.exit_code == 0
        assert "myFn" in result.output

    def test_no_frames(self, runner):
        result = runner.invoke(main, ["parse"], input="Error: only a banner\n")
        assert "No frames found" in result.output


class TestSendCommands:
    def test_send_requires_dsn(self, runner, sent):
        result = runner.invoke(main, ["send", "hello"])
        assert result.exit_code == 1
        assert sent.calls == []

    def test_send_message(self, runner, sent):
        result = runner.invoke(main, ["send", "hello", "--level", "warning", "--dsn", "https://x/ingest"])
        assert result.exit_code == 0, result.output
        body = json.loads(sent.calls[0]["content"])
        assert body["message"] == "hello"
        assert body["level"] == "warning"
        assert body["environment"] == "production"

    def test_send_uses_saved_dsn(self, runner, sent):
        runner.invoke(main, ["init", "--dsn", "https://saved/ingest", "--environment", "qa"])
        result = runner.invoke(main, ["send", "hi"])
        assert result.exit_code == 0, result.output
        assert sent.calls[0]["url"] == "https://saved/ingest"
        assert json.loads(sent.calls[0]["content"])["environment"] == "qa"

    def test_vital_unitless(self, runner, sent):
        result = runner.invoke(main, ["vital", "CLS", "0.12345", "--unit", "none", "--dsn", "https://x/ingest"])
        assert result.exit_code == 0, result.output
        body = json.loads(sent.calls[0]["content"])
        assert body["message"] == "Performance: CLS = 0.1235"

    def test_vital_reports_send_still_in_flight(self, runner, monkeypatch):
        clients = []

        def make_client():
            client = DevPulse(fetch=RecordingFetch("hang"))
            clients.append(client)
            return client

        monkeypatch.setattr(cli_main, "DevPulse", make_client)
        result = runner.invoke(main, ["vital", "LCP", "1200", "--dsn", "https://x/ingest", "--timeout", "0.05"])
        clients[0].close(timeout=0.1)

        assert result.exit_code == 0, result.output
        assert "still in flight" in result.output
        assert "Sent LCP" not in result.output
