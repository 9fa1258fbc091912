"""Tests for settings loading."""

import pytest

from hostlabels.config import (
    CONFIG_ENV_VAR,
    ProviderKind,
    Settings,
    load_settings,
)
from hostlabels.core.exceptions import LabelError
from hostlabels.facts.base import StaticFactProvider
from hostlabels.facts.system import PortableFactProvider

STATIC_CONFIG = """\
label_file: /etc/hostlabels/labels
output_capacity: 4096
expansion_max_length: 256
provider: static
static_facts:
  os:
    name: Debian
    version: "12"
    hostname: cfg-host
  network:
    primary_index: 0
    interfaces:
      - name: eth0
        mac: "02:00:00:00:00:01"
        ipv4: ["10.1.0.5"]
  utc_offset: 1
"""


class TestLoadSettings:
    """Test reading settings from YAML."""

    def test_defaults_without_path(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        settings = load_settings()

        assert settings == Settings()
        assert settings.output_capacity == 65536
        assert settings.expansion_max_length == 1024
        assert settings.provider == ProviderKind.AUTO

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_settings(tmp_path / "missing.yaml") == Settings()

    def test_load_static_config(self, tmp_path):
        path = tmp_path / "hostlabels.yaml"
        path.write_text(STATIC_CONFIG)

        settings = load_settings(path)

        assert str(settings.label_file) == "/etc/hostlabels/labels"
        assert settings.output_capacity == 4096
        assert settings.expansion_max_length == 256
        assert settings.provider == ProviderKind.STATIC
        assert settings.static_facts.os.hostname == "cfg-host"

    def test_env_var(self, tmp_path, monkeypatch):
        path = tmp_path / "hostlabels.yaml"
        path.write_text("output_capacity: 100\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

        assert load_settings().output_capacity == 100

    def test_empty_file(self, tmp_path):
        path = tmp_path / "hostlabels.yaml"
        path.write_text("")

        assert load_settings(path) == Settings()

    def test_invalid_value(self, tmp_path):
        path = tmp_path / "hostlabels.yaml"
        path.write_text("output_capacity: -1\n")

        with pytest.raises(LabelError):
            load_settings(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "hostlabels.yaml"
        path.write_text("provider: [unclosed\n")

        with pytest.raises(LabelError):
            load_settings(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "hostlabels.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(LabelError):
            load_settings(path)


class TestBuildProvider:
    """Test provider construction from settings."""

    def test_static_provider(self, tmp_path):
        path = tmp_path / "hostlabels.yaml"
        path.write_text(STATIC_CONFIG)

        provider = load_settings(path).build_provider()

        assert isinstance(provider, StaticFactProvider)
        assert provider.get_os_info().name == "Debian"
        assert provider.list_network_interfaces().primary.ipv4 == ["10.1.0.5"]
        assert provider.utc_offset_hours() == 1

    def test_portable_provider(self):
        provider = Settings(provider="portable").build_provider()
        assert isinstance(provider, PortableFactProvider)
