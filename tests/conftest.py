"""Shared fixtures: a simulated bus with two devices and one virtual registry."""

import json

import pytest

from devscan.core.capabilities import DeviceCount, DeviceFeature
from devscan.core.device_cache import DeviceCache
from devscan.core.device_scanner import DeviceScanner
from devscan.core.snapshot_builder import SnapshotBuilder
from devscan.core.virtual_registry import VirtualDeviceRegistry
from devscan.drivers.device_ids import DeviceID
from devscan.drivers.simulated import (
    SimulatedBus,
    SimulatedCapabilityProvider,
    SimulatedDevice,
)

KONA4_SERIAL = "1A234567"
DNXIV_SERIAL = "2B345678"

REGISTRY_CONTENT = {
    "v2": {
        "deviceConfigList": [
            {
                "serial": KONA4_SERIAL,
                "virtualDevices": [
                    {"id": "vd-1", "name": "StudioA"},
                    {"id": "vd-2", "name": "StudioB"},
                ],
            },
            {"serial": "9Z999999", "virtualDevices": []},
        ]
    }
}


@pytest.fixture
def kona4():
    return SimulatedDevice(
        device_id=DeviceID.KONA4,
        serial=KONA4_SERIAL,
        features=frozenset({
            DeviceFeature.CAN_DO_4K_VIDEO,
            DeviceFeature.CAN_DO_12G_SDI,
            DeviceFeature.CAN_DO_AUDIO_96K,
            DeviceFeature.CAN_DO_AES_AUDIO,
            DeviceFeature.CAN_DO_AUDIO_8_CHANNELS,
        }),
        counts={
            DeviceCount.NUM_VIDEO_INPUTS: 4,
            DeviceCount.NUM_VIDEO_OUTPUTS: 4,
            DeviceCount.NUM_AUDIO_SYSTEMS: 4,
            DeviceCount.NUM_LTC_INPUTS: 1,
            DeviceCount.NUM_EMBEDDED_AUDIO_INPUT_CHANNELS: 16,
        },
    )


@pytest.fixture
def dnxiv():
    return SimulatedDevice(
        device_id=DeviceID.IO4KPLUS,
        serial=DNXIV_SERIAL,
        features=frozenset({DeviceFeature.CAN_DO_4K_VIDEO}),
        counts={
            DeviceCount.NUM_VIDEO_INPUTS: 4,
            DeviceCount.NUM_HDMI_VIDEO_OUTPUTS: 1,
        },
    )


@pytest.fixture
def bus(kona4, dnxiv):
    return SimulatedBus([kona4, dnxiv])


@pytest.fixture
def capabilities():
    return SimulatedCapabilityProvider()


@pytest.fixture
def registry_file(tmp_path):
    path = tmp_path / "controlpanelConfigPrimary.json"
    path.write_text(json.dumps(REGISTRY_CONTENT), encoding="utf-8")
    return path


@pytest.fixture
def registry(registry_file):
    return VirtualDeviceRegistry(registry_file)


@pytest.fixture
def builder(bus, capabilities, registry):
    return SnapshotBuilder(bus.create_handle, capabilities, virtual_registry=registry)


@pytest.fixture
def cache(builder):
    return DeviceCache(builder)


@pytest.fixture
def listing():
    """Collects LIST output."""
    return []


@pytest.fixture
def scanner(cache, bus, capabilities, registry, listing):
    return DeviceScanner(
        cache,
        bus.create_handle,
        capabilities,
        virtual_registry=registry,
        listing_sink=listing.append,
    )
