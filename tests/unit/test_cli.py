"""
Unit tests for CLI using Typer.

These tests verify that the CLI correctly handles commands
using Typer's CliRunner. Fleet probes are replaced by mocks.
"""

import json
import re

import pytest
from typer.testing import CliRunner

from ampwatch import __version__
from ampwatch import config as config_module
from ampwatch.cli import app
from ampwatch.discovery import FleetScanner
from ampwatch.exceptions import TmuxNotFoundError
from ampwatch.mocks import MockFileSystem, MockSubprocess, MockTmux

from fixtures import PREFIX, add_instance_sessions, gh_router, make_pr


def strip_ansi(text: str) -> str:
    """Remove ANSI escape codes from text."""
    return re.sub(r'\x1b\[[0-9;]*m', '', text)


runner = CliRunner()


@pytest.fixture
def mock_fleet(monkeypatch):
    """Make FleetScanner.build_fleet run against an in-memory fleet."""
    tmux = MockTmux()
    fs = MockFileSystem()
    subprocess_runner = MockSubprocess()
    add_instance_sessions(tmux, "abc12345", cwd="/work/widgets",
                          agents={"reviewer-alpha", "impl-alpha"})
    fs.add_dir("/tmp/amptown-abc12345/logs")
    fs.set_file("/tmp/amptown-abc12345/logs/impl-alpha.log", "Starting\nopened PR #3\n")
    subprocess_runner.set_response("gh", gh_router(
        open_prs=[make_pr(3, title="Add caching")],
        merged_prs=[make_pr(1, state="MERGED")],
    ))

    original_build = FleetScanner.build_fleet
    seen = {}

    def build_fleet(self):
        seen["prefix"] = self.prefix
        mocked = FleetScanner(prefix=self.prefix, tmux=tmux, fs=fs,
                              runner=subprocess_runner, merged_limit=self.merged_limit, env={})
        return original_build(mocked)

    monkeypatch.setattr(FleetScanner, "build_fleet", build_fleet)
    return seen


class TestCLICommands:
    """Test CLI commands"""

    def test_main_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        output = strip_ansi(result.stdout)
        assert "amptown" in output
        assert "status" in output
        assert "doctor" in output
        assert "config" in output

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.stdout.strip() == f"ampwatch {__version__}"

    def test_no_args_without_tmux(self, monkeypatch):
        def missing():
            raise TmuxNotFoundError("tmux is required but not found.")

        monkeypatch.setattr("ampwatch.dependency_check.require_tmux", missing)
        result = runner.invoke(app, [])
        assert result.exit_code == 1
        assert "tmux is required" in strip_ansi(result.stdout)

    def test_no_args_launches_tui(self, monkeypatch):
        launched = {}
        monkeypatch.setattr("ampwatch.dependency_check.require_tmux", lambda: "/usr/bin/tmux")
        monkeypatch.setattr("ampwatch.logging_config.setup_tui_logging", lambda log_file=None: None)
        monkeypatch.setattr(
            "ampwatch.tui.run_tui",
            lambda config, diagnostics=False: launched.update(config=config, diagnostics=diagnostics),
        )

        result = runner.invoke(app, ["--prefix", "swarm", "--refresh", "2", "--diagnostics"])

        assert result.exit_code == 0
        assert launched["config"].fleet_prefix == "swarm"
        assert launched["config"].refresh_interval == 2.0
        assert launched["diagnostics"] is True


class TestStatusCommand:
    """Test status command"""

    def test_json_snapshot(self, mock_fleet):
        result = runner.invoke(app, ["status", "--json"])
        assert result.exit_code == 0

        data = json.loads(result.stdout)
        assert len(data) == 1
        instance = data[0]
        assert instance["id"] == "abc12345"
        assert instance["repo_name"] == "widgets"
        assert instance["logs_dir"] == "/tmp/amptown-abc12345/logs"
        assert instance["running_agents"] == 2
        assert [a["name"] for a in instance["agents"]][3] == "impl-alpha"
        assert instance["agents"][3]["iterations"] == 1
        assert instance["agents"][3]["last_activity"] == "opened PR #3"
        assert instance["open_prs"][0]["title"] == "Add caching"
        assert instance["open_prs"][0]["headRefName"] == "feature"
        assert instance["merged_prs"][0]["number"] == 1

    def test_table(self, mock_fleet):
        result = runner.invoke(app, ["status"])
        assert result.exit_code == 0
        output = strip_ansi(result.stdout)
        assert "abc12345" in output
        assert "widgets" in output

    def test_prefix_option(self, mock_fleet):
        result = runner.invoke(app, ["status", "--prefix", "swarm", "--json"])
        assert result.exit_code == 0
        assert mock_fleet["prefix"] == "swarm"
        assert json.loads(result.stdout) == []

    def test_uses_configured_tmux_socket(self, mock_fleet, monkeypatch):
        sockets = []

        class RecordingTmux(MockTmux):
            def __init__(self, socket_name=None):
                super().__init__()
                sockets.append(socket_name)

        monkeypatch.setattr("ampwatch.implementations.RealTmux", RecordingTmux)
        monkeypatch.setenv("AMPWATCH_TMUX_SOCKET", "fleet-sock")

        result = runner.invoke(app, ["status", "--json"])

        assert result.exit_code == 0
        assert sockets == ["fleet-sock"]

    def test_empty_fleet_message(self, monkeypatch):
        monkeypatch.setattr(FleetScanner, "build_fleet", lambda self: [])
        result = runner.invoke(app, ["status"])
        assert result.exit_code == 0
        assert f"No {PREFIX} instances found" in strip_ansi(result.stdout)


class TestDoctorCommand:
    """Test doctor command"""

    def _status(self, tmux_available):
        return {
            "tmux": {"available": tmux_available, "path": "/usr/bin/tmux" if tmux_available else None,
                     "version": "tmux 3.4" if tmux_available else None, "required": True},
            "gh": {"available": False, "path": None, "version": None, "required": False},
        }

    def test_all_required_present(self, monkeypatch):
        monkeypatch.setattr("ampwatch.dependency_check.get_dependency_status",
                            lambda command: self._status(True))
        result = runner.invoke(app, ["doctor"])
        assert result.exit_code == 0
        output = strip_ansi(result.stdout)
        assert "tmux 3.4" in output
        assert "optional" in output

    def test_missing_tmux_fails(self, monkeypatch):
        monkeypatch.setattr("ampwatch.dependency_check.get_dependency_status",
                            lambda command: self._status(False))
        result = runner.invoke(app, ["doctor"])
        assert result.exit_code == 1
        assert "required" in strip_ansi(result.stdout)


class TestConfigCommands:
    """Test config subcommands"""

    def test_path(self):
        result = runner.invoke(app, ["config", "path"])
        assert result.exit_code == 0
        assert result.stdout.strip() == str(config_module.CONFIG_PATH)

    def test_init_creates_template(self):
        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 0
        content = config_module.CONFIG_PATH.read_text()
        assert "# fleet_prefix: amptown" in content
        # Every option is commented out, so the file resolves to defaults
        assert config_module.load_config() == {}

    def test_init_refuses_to_overwrite(self):
        config_module.save_config({"fleet_prefix": "swarm"})
        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 1
        assert "already exists" in strip_ansi(result.stdout)
        assert config_module.load_config() == {"fleet_prefix": "swarm"}

    def test_init_force(self):
        config_module.save_config({"fleet_prefix": "swarm"})
        result = runner.invoke(app, ["config", "init", "--force"])
        assert result.exit_code == 0
        assert config_module.load_config() == {}

    def test_show_defaults(self):
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        output = strip_ansi(result.stdout)
        assert "No config file found" in output
        assert "fleet_prefix: amptown" in output
        assert "merged_limit: 10" in output
        assert "tmux_socket: (default)" in output

    def test_show_tmux_socket(self, monkeypatch):
        monkeypatch.setenv("AMPWATCH_TMUX_SOCKET", "fleet-sock")
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "tmux_socket: fleet-sock" in strip_ansi(result.stdout)

    def test_show_file_values(self):
        config_module.save_config({"fleet_prefix": "swarm", "merged_limit": 4})
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        output = strip_ansi(result.stdout)
        assert "fleet_prefix: swarm" in output
        assert "merged_limit: 4" in output
