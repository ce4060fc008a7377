"""Tests for configuration loading."""

import pytest
import yaml

from vhost_monitor.config import ConfigManager, MonitorConfig
from vhost_monitor.errors import ConfigError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in (
        "VHOST_MONITOR_CONFIG",
        "VHOST_MONITOR_BATCH_SIZE",
        "VHOST_MONITOR_BATCH_DELAY",
        "VHOST_MONITOR_USER_AGENT",
        "VHOST_MONITOR_USE_SUDO",
    ):
        monkeypatch.delenv(var, raising=False)


def test_defaults_without_file(tmp_path):
    config = ConfigManager(tmp_path).load()

    assert config == MonitorConfig()
    assert config.batch_size == 3
    assert config.batch_delay == 2.0
    assert config.handshake_timeout == 20.0
    assert config.probe_timeout == 10.0
    assert config.plesk_cert_store == "/opt/psa/var/certificates/"


def test_yaml_values_override_defaults(tmp_path):
    (tmp_path / "config.yaml").write_text(
        yaml.safe_dump({"batch_size": 5, "sites_enabled_dir": "/srv/nginx/on", "unknown_key": 1})
    )

    config = ConfigManager(tmp_path).load()

    assert config.batch_size == 5
    assert config.sites_enabled_dir == "/srv/nginx/on"


def test_env_overrides_win_over_file(tmp_path, monkeypatch):
    (tmp_path / "config.yaml").write_text(yaml.safe_dump({"batch_size": 5}))
    monkeypatch.setenv("VHOST_MONITOR_BATCH_SIZE", "2")
    monkeypatch.setenv("VHOST_MONITOR_USE_SUDO", "no")
    monkeypatch.setenv("VHOST_MONITOR_USER_AGENT", "probe/9")

    config = ConfigManager(tmp_path).load()

    assert config.batch_size == 2
    assert config.use_sudo is False
    assert config.user_agent == "probe/9"


def test_config_dir_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("VHOST_MONITOR_CONFIG", str(tmp_path))

    assert ConfigManager().config_file == tmp_path.resolve() / "config.yaml"


@pytest.mark.parametrize(
    "content",
    [
        "batch_size: 0\n",
        "batch_delay: -1\n",
        "probe_timeout: 0\n",
        "batch_size: three\n",
        "- just\n- a list\n",
        "batch_size: [unclosed\n",
    ],
)
def test_invalid_files_raise_config_error(tmp_path, content):
    (tmp_path / "config.yaml").write_text(content)

    with pytest.raises(ConfigError):
        ConfigManager(tmp_path).load()


def test_invalid_env_value_raises(tmp_path, monkeypatch):
    monkeypatch.setenv("VHOST_MONITOR_BATCH_DELAY", "soon")

    with pytest.raises(ConfigError):
        ConfigManager(tmp_path).load()


def test_save_round_trips(tmp_path):
    mgr = ConfigManager(tmp_path / "nested")
    mgr.save(MonitorConfig(batch_size=4))

    assert mgr.load().batch_size == 4
