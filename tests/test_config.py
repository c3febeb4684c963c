"""Tests for configuration loading and scanner composition."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from devscan.core.config import Config, apply_env_overrides, get_config, reload_config
from devscan.core.device_scanner import DeviceScanner
from devscan.drivers.device_ids import DeviceID
from devscan.drivers.simulated import (
    SimulatedBus,
    SimulatedCapabilityProvider,
    SimulatedDevice,
)

from conftest import KONA4_SERIAL

SHIPPED_CONFIG = Path(__file__).resolve().parent.parent / "config" / "devscan.yaml"

ENV_VARS = (
    "DEVSCAN_LOG_LEVEL",
    "DEVSCAN_LOG_DIR",
    "DEVSCAN_MAX_SLOTS",
    "DEVSCAN_MONITOR_INTERVAL",
    "DEVSCAN_RESCAN_ON_QUERY",
    "DEVSCAN_VIRTUAL_DEVICES",
    "DEVSCAN_VIRTUAL_CONFIG",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = Config()

    assert config.system.log_level == "INFO"
    assert config.scanner.max_slots == 64
    assert config.scanner.virtual_index_base == 100
    assert config.scanner.rescan_on_query is True
    assert config.virtual_devices.enabled is True
    assert config.virtual_devices.url_scheme == "ntv2virtualdev"
    assert config.simulation.devices == []


def test_missing_file_uses_defaults(tmp_path):
    config = Config.from_yaml(tmp_path / "absent.yaml")

    assert config == Config()


def test_load_yaml(tmp_path):
    path = tmp_path / "devscan.yaml"
    path.write_text(
        "system:\n"
        "  log_level: debug\n"
        "scanner:\n"
        "  max_slots: 8\n"
        "simulation:\n"
        "  devices:\n"
        "    - device_id: 0x10518400\n"
        f"      serial: \"{KONA4_SERIAL}\"\n"
        "      features: [4k_video, CAN_DO_AES_AUDIO]\n"
        "      counts: {audio_systems: 2}\n",
        encoding="utf-8",
    )

    config = Config.from_yaml(path)

    assert config.system.log_level == "DEBUG"
    assert config.scanner.max_slots == 8
    assert config.simulation.devices[0].device_id == DeviceID.KONA4
    assert config.simulation.devices[0].counts == {"audio_systems": 2}


def test_empty_file(tmp_path):
    path = tmp_path / "devscan.yaml"
    path.write_text("", encoding="utf-8")

    assert Config.from_yaml(path) == Config()


def test_env_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("DEVSCAN_MAX_SLOTS", "16")
    monkeypatch.setenv("DEVSCAN_MONITOR_INTERVAL", "0.5")
    monkeypatch.setenv("DEVSCAN_RESCAN_ON_QUERY", "false")
    monkeypatch.setenv("DEVSCAN_VIRTUAL_CONFIG", "/etc/devscan/virtual.json")

    config = Config.from_yaml(tmp_path / "absent.yaml")

    assert config.scanner.max_slots == 16
    assert config.scanner.monitor_interval_sec == 0.5
    assert config.scanner.rescan_on_query is False
    assert config.virtual_devices.config_path == "/etc/devscan/virtual.json"


def test_env_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "devscan.yaml"
    path.write_text("virtual_devices:\n  enabled: true\n", encoding="utf-8")
    monkeypatch.setenv("DEVSCAN_VIRTUAL_DEVICES", "False")

    assert Config.from_yaml(path).virtual_devices.enabled is False


def test_env_override_keeps_other_section_fields(tmp_path, monkeypatch):
    path = tmp_path / "devscan.yaml"
    path.write_text("scanner:\n  max_slots: 8\n  virtual_index_base: 200\n", encoding="utf-8")
    monkeypatch.setenv("DEVSCAN_MAX_SLOTS", "4")

    config = Config.from_yaml(path)

    assert config.scanner.max_slots == 4
    assert config.scanner.virtual_index_base == 200


@pytest.mark.parametrize("value,expected", [("yes", True), ("0", False), ("OFF", False)])
def test_env_boolean_spellings(tmp_path, monkeypatch, value, expected):
    monkeypatch.setenv("DEVSCAN_RESCAN_ON_QUERY", value)

    assert Config.from_yaml(tmp_path / "absent.yaml").scanner.rescan_on_query is expected


def test_env_override_with_bad_value_raises(tmp_path, monkeypatch):
    monkeypatch.setenv("DEVSCAN_MAX_SLOTS", "abc")

    with pytest.raises(ValidationError):
        Config.from_yaml(tmp_path / "absent.yaml")


def test_env_override_does_not_touch_input(monkeypatch):
    monkeypatch.setenv("DEVSCAN_LOG_LEVEL", "debug")
    data = {"system": {"name": "studio"}}

    merged = apply_env_overrides(data)

    assert merged["system"] == {"name": "studio", "log_level": "debug"}
    assert data == {"system": {"name": "studio"}}


def test_invalid_values_raise(tmp_path):
    path = tmp_path / "devscan.yaml"
    path.write_text("scanner:\n  max_slots: 0\n", encoding="utf-8")

    with pytest.raises(ValidationError):
        Config.from_yaml(path)


def test_to_yaml(tmp_path):
    config = Config()
    config.scanner.max_slots = 12
    path = tmp_path / "out" / "devscan.yaml"

    config.to_yaml(path)

    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert data["scanner"]["max_slots"] == 12
    assert Config.from_yaml(path) == config


def test_global_config(tmp_path):
    path = tmp_path / "devscan.yaml"
    path.write_text("system:\n  name: studio\n", encoding="utf-8")

    config = reload_config(path)

    assert config.system.name == "studio"
    assert get_config() is config


def test_shipped_config_loads():
    config = Config.from_yaml(SHIPPED_CONFIG)

    assert [d.serial for d in config.simulation.devices] == ["1A234567", "2B345678"]


class TestFromConfig:

    def make_scanner(self, config, bus):
        return DeviceScanner.from_config(config, bus.create_handle, SimulatedCapabilityProvider())

    def test_settings_are_applied(self, registry_file):
        config = Config()
        config.scanner.max_slots = 1
        config.scanner.virtual_index_base = 10
        config.scanner.rescan_on_query = False
        config.virtual_devices.config_path = str(registry_file)

        bus = SimulatedBus([
            SimulatedDevice(device_id=DeviceID.KONA4, serial=KONA4_SERIAL),
            SimulatedDevice(device_id=DeviceID.KONA1),
        ])
        scanner = self.make_scanner(config, bus)
        scanner.rescan()

        assert scanner.rescan_on_query is False
        assert scanner.virtual_registry.path == registry_file
        assert [r.index for r in scanner.get_device_info_list()] == [0, 10, 11]

    def test_virtual_devices_disabled(self, registry_file):
        config = Config()
        config.virtual_devices.enabled = False
        config.virtual_devices.config_path = str(registry_file)

        bus = SimulatedBus([SimulatedDevice(device_id=DeviceID.KONA4, serial=KONA4_SERIAL)])
        scanner = self.make_scanner(config, bus)
        scanner.rescan()

        assert scanner.virtual_registry is None
        assert scanner.get_num_devices() == 1

    def test_simulated_devices_from_config(self):
        config = Config.from_yaml(SHIPPED_CONFIG)
        bus = SimulatedBus(SimulatedDevice.from_config(d) for d in config.simulation.devices)
        config.virtual_devices.enabled = False

        scanner = self.make_scanner(config, bus)

        assert scanner.device_id_present(DeviceID.IO4KPLUS) is True
        record = scanner.get_device_info(0)
        assert record.capabilities.has_4k_support is True
        assert record.audio.sample_rates == (48000, 96000)
