"""Tests for Typer-based CLI."""

import json

import pytest
import yaml
from typer.testing import CliRunner

from hostlabels import __version__
from hostlabels.cli.app import app

STATIC_CONFIG = """\
provider: static
static_facts:
  os:
    name: Debian
    version: "12"
    hostname: cli-host
  network:
    primary_index: 0
    interfaces:
      - name: eth0
        mac: "02:00:00:00:00:01"
        ipv4: ["10.1.0.5"]
      - name: eth1
        ipv4: ["10.1.0.6"]
  utc_offset: 0
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "hostlabels.yaml"
    path.write_text(STATIC_CONFIG)
    return path


class TestCLIStructure:
    """Test CLI structure and basic functionality."""

    def test_app_help(self):
        runner = CliRunner()
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ["show", "get", "set", "list", "expand", "facts"]:
            assert command in result.output

    def test_version_flag(self):
        runner = CliRunner()
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"hostlabels v{__version__}" in result.output

    def test_invalid_log_level(self, label_file):
        runner = CliRunner()
        result = runner.invoke(app, ["get", str(label_file), "a", "--log-level", "loud"])

        assert result.exit_code == 1


class TestShowCommand:
    """Test rendering labels."""

    def test_show_expands(self, tmp_path, config_file):
        path = tmp_path / "labels"
        path.write_text('"host":$(hostname)\n!"ips":$(ipv4.primary);$(ipv4.others)\n')

        runner = CliRunner()
        result = runner.invoke(app, ["show", str(path), "--config", str(config_file)])

        assert result.exit_code == 0
        assert result.output == '"host":cli-host\n!"ips":10.1.0.5;10.1.0.6\n'

    def test_show_missing_file(self, tmp_path, config_file):
        runner = CliRunner()
        result = runner.invoke(
            app, ["show", str(tmp_path / "missing"), "--config", str(config_file)]
        )

        assert result.exit_code == 0

    def test_show_overflow(self, label_file, config_file):
        runner = CliRunner()
        result = runner.invoke(
            app,
            ["show", str(label_file), "--capacity", "5", "--config", str(config_file)],
        )

        assert result.exit_code == 1

    def test_show_unreadable(self, tmp_path, config_file):
        runner = CliRunner()
        result = runner.invoke(app, ["show", str(tmp_path), "--config", str(config_file)])

        assert result.exit_code == 1


class TestGetSetCommands:
    """Test reading and updating single labels."""

    def test_get(self, label_file):
        runner = CliRunner()
        result = runner.invoke(app, ["get", str(label_file), "b"])

        assert result.exit_code == 0
        assert result.output == "2\n"

    def test_get_missing_key(self, label_file):
        runner = CliRunner()
        result = runner.invoke(app, ["get", str(label_file), "zzz"])

        assert result.exit_code == 1

    def test_set_overwrites(self, label_file):
        runner = CliRunner()
        result = runner.invoke(app, ["set", str(label_file), "a", "$(hostname)"])

        assert result.exit_code == 0
        assert label_file.read_text() == '"a":$(hostname)\n!"b":2\n'

    def test_set_append_and_hidden(self, label_file):
        runner = CliRunner()
        result = runner.invoke(
            app, ["set", str(label_file), "a", "again", "--append", "--hidden"]
        )

        assert result.exit_code == 0
        assert label_file.read_text() == '"a":1\n!"b":2\n!"a":again\n'

    def test_set_creates_file(self, tmp_path):
        path = tmp_path / "labels"
        runner = CliRunner()
        result = runner.invoke(app, ["set", str(path), "env", "prod"])

        assert result.exit_code == 0
        assert path.read_text() == '"env":prod\n'

    def test_set_refuses_non_utf8_file(self, tmp_path):
        path = tmp_path / "labels"
        original = b'"a":\xff\n"b":2\n'
        path.write_bytes(original)

        runner = CliRunner()
        result = runner.invoke(app, ["set", str(path), "b", "3"])

        assert result.exit_code == 1
        assert path.read_bytes() == original

    def test_set_invalid_key(self, label_file):
        runner = CliRunner()
        result = runner.invoke(app, ["set", str(label_file), 'bad":key', "x"])

        assert result.exit_code == 1
        assert label_file.read_text() == '"a":1\n!"b":2\n'


class TestListCommand:
    """Test listing labels."""

    def test_list_hides_hidden(self, label_file):
        runner = CliRunner()
        result = runner.invoke(app, ["list", str(label_file)])

        assert result.exit_code == 0
        assert result.output == "a=1\n"

    def test_list_all(self, label_file):
        runner = CliRunner()
        result = runner.invoke(app, ["list", str(label_file), "--all"])

        assert result.exit_code == 0
        assert result.output == "a=1\nb=2 (hidden)\n"

    def test_list_json(self, label_file):
        runner = CliRunner()
        result = runner.invoke(app, ["list", str(label_file), "--all", "--output", "json"])

        assert result.exit_code == 0
        assert json.loads(result.output)[1] == {"key": "b", "value": "2", "hidden": True}

    def test_list_missing_file(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(app, ["list", str(tmp_path / "missing")])

        assert result.exit_code == 0
        assert result.output == ""


class TestExpandAndFacts:
    """Test expansion of ad-hoc values and fact output."""

    def test_expand(self, config_file):
        runner = CliRunner()
        result = runner.invoke(
            app,
            ["expand", "$(os.name)/$(mac.primary)/$(nope)", "--config", str(config_file)],
        )

        assert result.exit_code == 0
        assert result.output == "Debian/02:00:00:00:00:01/nope\n"

    def test_facts_yaml(self, config_file):
        runner = CliRunner()
        result = runner.invoke(app, ["facts", "--config", str(config_file)])

        assert result.exit_code == 0
        data = yaml.safe_load(result.output)
        assert data["os"]["hostname"] == "cli-host"
        assert data["network"]["primary_index"] == 0
        assert data["utc_offset"] == 0

    def test_facts_json(self, config_file):
        runner = CliRunner()
        result = runner.invoke(
            app, ["facts", "--output", "json", "--config", str(config_file)]
        )

        assert result.exit_code == 0
        assert json.loads(result.output)["network"]["interfaces"][1]["name"] == "eth1"
