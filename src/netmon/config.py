"""User settings — XDG config path, settings.yaml, env var overrides."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

SETTINGS_FILE = "settings.yaml"


def _default_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "netmon"
    return Path.home() / ".config" / "netmon"


@dataclass
class NetmonConfig:
    """Application-wide configuration."""

    config_dir: Path = field(default_factory=_default_config_dir)
    service_names: bool = True
    dns_enabled: bool = True
    collect_timeout: float = 10.0
    default_signal: str = "SIGTERM"

    @property
    def settings_path(self) -> Path:
        return self.config_dir / SETTINGS_FILE

    @classmethod
    def load(cls, config_dir: Path | None = None) -> NetmonConfig:
        """Load settings.yaml (if present), then apply environment overrides."""
        config = cls(config_dir=config_dir) if config_dir else cls()

        path = config.settings_path
        if path.is_file():
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
            if data is None:
                data = {}
            if not isinstance(data, dict):
                raise ValueError(f"{path}: settings must be a mapping")
            config._apply(data)
            logger.debug("Loaded settings from %s", path)

        env_timeout = os.environ.get("NETMON_COLLECT_TIMEOUT")
        if env_timeout:
            config.collect_timeout = float(env_timeout)

        env_signal = os.environ.get("NETMON_DEFAULT_SIGNAL")
        if env_signal:
            config.default_signal = env_signal

        return config

    def save(self) -> Path:
        """Write the current settings to settings.yaml."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        data = {
            "serviceNames": self.service_names,
            "dnsEnabled": self.dns_enabled,
            "collectTimeout": self.collect_timeout,
            "defaultSignal": self.default_signal,
        }
        self.settings_path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return self.settings_path

    def _apply(self, data: dict) -> None:
        if "serviceNames" in data:
            self.service_names = _bool_setting(data, "serviceNames")
        if "dnsEnabled" in data:
            self.dns_enabled = _bool_setting(data, "dnsEnabled")
        if "collectTimeout" in data:
            self.collect_timeout = float(data["collectTimeout"])
        if "defaultSignal" in data:
            self.default_signal = str(data["defaultSignal"])


def _bool_setting(data: dict, key: str) -> bool:
    value = data[key]
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be true or false, got {value!r}")
    return value
