"""
Configuration loader and manager for the device scanner.

Provides centralized configuration management with validation,
environment variable overrides, and persistent storage.
"""

import os
from pathlib import Path
from typing import Any, Optional, Dict
import yaml
from pydantic import BaseModel, Field, field_validator
from loguru import logger


class SystemConfig(BaseModel):
    """System-level configuration."""
    name: str = "devscan"
    log_level: str = "INFO"
    log_dir: str = "./logs"

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


class ScannerConfig(BaseModel):
    """Snapshot and query settings."""
    max_slots: int = Field(default=64, ge=1)
    virtual_index_base: int = Field(default=100, ge=0)
    monitor_interval_sec: float = Field(default=2.0, gt=0)
    rescan_on_query: bool = True


class VirtualDevicesConfig(BaseModel):
    """Virtual device registry settings."""
    enabled: bool = True
    config_path: str = "~/.aja/controlpanelConfigPrimary.json"
    url_scheme: str = "ntv2virtualdev"


class SimulatedDeviceConfig(BaseModel):
    """One simulated device profile."""
    device_id: int
    serial: str = ""
    features: list[str] = Field(default_factory=list)
    counts: dict[str, int] = Field(default_factory=dict)
    host_name: str = ""
    remote: bool = False


class SimulationConfig(BaseModel):
    """Simulated driver used when no hardware driver is installed."""
    devices: list[SimulatedDeviceConfig] = Field(default_factory=list)


class Config(BaseModel):
    """Main configuration class for the device scanner."""

    system: SystemConfig = Field(default_factory=SystemConfig)
    scanner: ScannerConfig = Field(default_factory=ScannerConfig)
    virtual_devices: VirtualDevicesConfig = Field(default_factory=VirtualDevicesConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """
        Load configuration from a YAML file.

        A missing file yields the defaults. ``DEVSCAN_*`` environment
        variables are applied on top in either case; their string values are
        converted by the model fields, so ``DEVSCAN_MAX_SLOTS=abc`` raises
        ValidationError like a bad file value would.
        """
        path = Path(path)
        if path.exists():
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        else:
            logger.warning(f"Config file not found: {path}, using defaults")
            data = {}

        return cls.model_validate(apply_env_overrides(data))

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to a YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            yaml.safe_dump(self.model_dump(mode="json"), default_flow_style=False, sort_keys=False),
            encoding="utf-8",
        )
        logger.info(f"Configuration saved to {path}")


# Environment variable -> (section, field)
ENV_OVERRIDES: Dict[str, tuple[str, str]] = {
    "DEVSCAN_LOG_LEVEL": ("system", "log_level"),
    "DEVSCAN_LOG_DIR": ("system", "log_dir"),
    "DEVSCAN_MAX_SLOTS": ("scanner", "max_slots"),
    "DEVSCAN_MONITOR_INTERVAL": ("scanner", "monitor_interval_sec"),
    "DEVSCAN_RESCAN_ON_QUERY": ("scanner", "rescan_on_query"),
    "DEVSCAN_VIRTUAL_DEVICES": ("virtual_devices", "enabled"),
    "DEVSCAN_VIRTUAL_CONFIG": ("virtual_devices", "config_path"),
}


def apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    """Copy ``data`` with the raw strings of any set ``DEVSCAN_*`` variables merged in."""
    merged = dict(data)
    for env_var, (section, field) in ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value is None:
            continue
        merged[section] = {**(merged.get(section) or {}), field: value}
        logger.debug(f"{env_var} overrides {section}.{field}")
    return merged


DEFAULT_CONFIG_PATH = Path("config") / "devscan.yaml"

# Command line use only; the core never reads it
_config: Optional[Config] = None


def get_config(config_path: Optional[str | Path] = None) -> Config:
    """Load the command line configuration once and return it."""
    global _config

    if _config is None:
        config_path = config_path or DEFAULT_CONFIG_PATH
        _config = Config.from_yaml(config_path)
        logger.info(f"Loaded configuration from {config_path}")

    return _config


def reload_config(config_path: Optional[str | Path] = None) -> Config:
    """Drop the cached configuration and load it again."""
    global _config
    _config = None
    return get_config(config_path)
