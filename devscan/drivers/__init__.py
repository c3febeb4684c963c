"""Device drivers usable with the scanner."""

from .device_ids import DeviceID, device_id_to_string
from .simulated import SimulatedBus, SimulatedCard, SimulatedCapabilityProvider, SimulatedDevice

__all__ = [
    "DeviceID",
    "device_id_to_string",
    "SimulatedBus",
    "SimulatedCard",
    "SimulatedCapabilityProvider",
    "SimulatedDevice",
]
