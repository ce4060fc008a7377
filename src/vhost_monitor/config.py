"""Configuration management for vhost-monitor."""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from vhost_monitor import __version__
from vhost_monitor.errors import ConfigError


@dataclass
class MonitorConfig:
    """Paths, limits and timeouts used by one collection cycle."""

    # Standard Debian/Ubuntu layout
    nginx_root: str = "/etc/nginx"
    sites_enabled_dir: str = "/etc/nginx/sites-enabled"
    sites_available_dir: str = "/etc/nginx/sites-available"
    reserved_site_name: str = "default"

    # Plesk layouts (root-owned, read through sudo)
    plesk_vhosts_root: str = "/var/www/vhosts/system"
    plesk_vhosts_depth: int = 2
    plesk_vhost_filename: str = "nginx.conf"
    plesk_conf_root: str = "/etc/nginx/plesk.conf.d"
    plesk_conf_glob: str = "vhosts/*.conf"
    plesk_cert_store: str = "/opt/psa/var/certificates/"

    use_sudo: bool = True
    privileged_read_timeout: float = 10.0

    batch_size: int = 3
    batch_delay: float = 2.0
    handshake_timeout: float = 20.0
    probe_timeout: float = 10.0
    user_agent: str = f"vhost-monitor/{__version__}"

    @property
    def privileged_roots(self) -> tuple[str, ...]:
        """Trees whose files must be read with elevated privileges."""
        return (self.plesk_vhosts_root, self.plesk_conf_root)

    def validate(self) -> None:
        if self.batch_size < 1:
            raise ConfigError(f"batch_size must be >= 1, got {self.batch_size}")
        if self.batch_delay < 0:
            raise ConfigError(f"batch_delay must be >= 0, got {self.batch_delay}")
        for name in ("handshake_timeout", "probe_timeout", "privileged_read_timeout"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive")


# Environment overrides: variable -> (field, converter)
ENV_OVERRIDES = {
    "VHOST_MONITOR_BATCH_SIZE": ("batch_size", int),
    "VHOST_MONITOR_BATCH_DELAY": ("batch_delay", float),
    "VHOST_MONITOR_USER_AGENT": ("user_agent", str),
    "VHOST_MONITOR_USE_SUDO": ("use_sudo", lambda v: v.strip().lower() not in {"0", "false", "no", "off"}),
}


class ConfigManager:
    """Loads MonitorConfig from a YAML file plus environment overrides."""

    def __init__(self, config_dir: Path | None = None) -> None:
        if config_dir is None:
            # Check for environment variable override
            env_config = os.getenv("VHOST_MONITOR_CONFIG")
            if env_config:
                config_dir = Path(env_config).expanduser().resolve()
            else:
                # Default to ~/.vhost-monitor
                config_dir = Path.home() / ".vhost-monitor"

        self.config_dir = config_dir
        self.config_file = config_dir / "config.yaml"

    def _load_file(self) -> dict[str, Any]:
        """Load raw settings from the YAML file, if present."""
        if not self.config_file.exists():
            return {}

        try:
            with open(self.config_file, "r") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read {self.config_file}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"{self.config_file} must contain a mapping")
        return data

    def load(self) -> MonitorConfig:
        """Build the effective configuration."""
        known = {f.name: f for f in fields(MonitorConfig)}
        values = {k: v for k, v in self._load_file().items() if k in known}

        for var, (name, convert) in ENV_OVERRIDES.items():
            raw = os.getenv(var)
            if raw is None or raw == "":
                continue
            try:
                values[name] = convert(raw)
            except ValueError as e:
                raise ConfigError(f"Invalid {var}={raw!r}: {e}") from e

        try:
            config = MonitorConfig(**values)
            config.validate()
        except TypeError as e:
            raise ConfigError(f"Invalid setting in {self.config_file}: {e}") from e
        return config

    def save(self, config: MonitorConfig) -> None:
        """Write a config file with every setting spelled out."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        data = {f.name: getattr(config, f.name) for f in fields(MonitorConfig)}
        with open(self.config_file, "w") as f:
            yaml.safe_dump(data, f, sort_keys=False)
