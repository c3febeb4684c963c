"""
Simulated device driver.

An in-memory bus of device slots with handles and a capability provider
that behave like a hardware driver. Devices can be plugged and unplugged at
runtime to exercise hot-plug detection.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union
from urllib.parse import parse_qs, urlsplit

from loguru import logger

from ..core.capabilities import DeviceCount, DeviceFeature
from ..core.interfaces import CapabilityProvider, DeviceHandle
from ..core.models import DEVICE_ID_NOTFOUND
from ..core.validation import serial_string_to_number
from .device_ids import device_id_to_string


def _lookup_enum(enum_cls, key: str):
    """Resolve an enum member from its name or value."""
    try:
        return enum_cls[key.upper()]
    except KeyError:
        return enum_cls(key.lower())


@dataclass
class SimulatedDevice:
    """Profile of one simulated device."""
    device_id: int
    serial: str = ""
    features: frozenset = frozenset()
    counts: dict = field(default_factory=dict)
    host_name: str = ""
    remote: bool = False

    @property
    def serial_number(self) -> int:
        return serial_string_to_number(self.serial)

    @classmethod
    def from_config(cls, config) -> "SimulatedDevice":
        """Build a device from a SimulatedDeviceConfig entry."""
        return cls(
            device_id=config.device_id,
            serial=config.serial,
            features=frozenset(_lookup_enum(DeviceFeature, name) for name in config.features),
            counts={_lookup_enum(DeviceCount, name): value for name, value in config.counts.items()},
            host_name=config.host_name,
            remote=config.remote,
        )


class SimulatedBus:
    """
    Densely packed device slots.

    Unplugging a device shifts the following devices down one slot, the way
    a driver renumbers devices after removal.
    """

    def __init__(
        self,
        devices: Iterable[SimulatedDevice] = (),
        open_delay: float = 0.0,
        virtual_url_scheme: str = "ntv2virtualdev"
    ):
        self._slots: list[SimulatedDevice] = list(devices)
        self._lock = threading.Lock()
        self.open_delay = open_delay
        self.virtual_url_scheme = virtual_url_scheme
        self.open_count = 0
        self.close_count = 0
        self.opened_specifiers: list[Union[int, str]] = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._slots)

    @property
    def open_handles(self) -> int:
        return self.open_count - self.close_count

    def plug(self, device: SimulatedDevice) -> int:
        """Attach a device to the next free slot and return the slot."""
        with self._lock:
            self._slots.append(device)
            slot = len(self._slots) - 1
        logger.debug(f"Simulated device 0x{device.device_id:08X} plugged into slot {slot}")
        return slot

    def unplug(self, slot: int) -> SimulatedDevice:
        with self._lock:
            device = self._slots.pop(slot)
        logger.debug(f"Simulated device 0x{device.device_id:08X} unplugged from slot {slot}")
        return device

    def device_at(self, slot: int) -> Optional[SimulatedDevice]:
        with self._lock:
            if 0 <= slot < len(self._slots):
                return self._slots[slot]
        return None

    def resolve(self, specifier: Union[int, str]) -> Optional[tuple[int, SimulatedDevice, str]]:
        """
        Find the device a specifier refers to.

        Accepts a slot index, a decimal index string, a virtual device URL,
        a serial number string or a remote host name.

        Returns:
            (slot, device, virtual device id) or None.
        """
        if isinstance(specifier, int):
            device = self.device_at(specifier)
            return (specifier, device, "") if device is not None else None

        if specifier.isdigit():
            return self.resolve(int(specifier))

        if specifier.startswith(f"{self.virtual_url_scheme}://"):
            query = parse_qs(urlsplit(specifier).query)
            serial = query.get("DeviceSN", [""])[0]
            vdid = query.get("vdid", [""])[0]
            found = self._find(lambda d: d.serial == serial) if serial else None
            return (found[0], found[1], vdid) if found else None

        found = self._find(lambda d: d.serial and d.serial.lower() == specifier.lower())
        if found is None:
            found = self._find(lambda d: d.remote and d.host_name == specifier)
        return (found[0], found[1], "") if found else None

    def _find(self, predicate) -> Optional[tuple[int, SimulatedDevice]]:
        with self._lock:
            for slot, device in enumerate(self._slots):
                if predicate(device):
                    return slot, device
        return None

    def create_handle(self) -> "SimulatedCard":
        return SimulatedCard(self)


class SimulatedCard(DeviceHandle):
    """Handle onto one device of a SimulatedBus."""

    def __init__(self, bus: SimulatedBus):
        self.bus = bus
        self.device: Optional[SimulatedDevice] = None
        self.index = 0
        self.virtual_id = ""

    def open(self, index_or_specifier: Union[int, str]) -> bool:
        self.close()
        if self.bus.open_delay:
            time.sleep(self.bus.open_delay)

        resolved = self.bus.resolve(index_or_specifier)
        if resolved is None:
            return False

        self.index, self.device, self.virtual_id = resolved
        self.bus.open_count += 1
        self.bus.opened_specifiers.append(index_or_specifier)
        return True

    def close(self) -> None:
        if self.device is not None:
            self.bus.close_count += 1
        self.device = None
        self.virtual_id = ""

    def is_open(self) -> bool:
        return self.device is not None

    def get_device_id(self) -> int:
        return self.device.device_id if self.device is not None else DEVICE_ID_NOTFOUND

    def get_serial_number(self) -> int:
        return self.device.serial_number if self.device is not None else 0

    def get_serial_number_string(self) -> Optional[str]:
        if self.device is None or not self.device.serial:
            return None
        return self.device.serial

    def is_remote(self) -> bool:
        return self.device is not None and self.device.remote

    def get_host_name(self) -> str:
        return self.device.host_name if self.device is not None else ""

    def get_index_number(self) -> int:
        return self.index


class SimulatedCapabilityProvider(CapabilityProvider):
    """Answers capability queries from the simulated device profile."""

    def is_supported(self, handle: DeviceHandle, feature: DeviceFeature) -> bool:
        device = getattr(handle, "device", None)
        return device is not None and feature in device.features

    def get_num_supported(self, handle: DeviceHandle, count: DeviceCount) -> int:
        device = getattr(handle, "device", None)
        if device is None:
            return 0
        return int(device.counts.get(count, 0))

    def device_id_to_string(self, device_id: int, for_retail_display: bool = False) -> str:
        return device_id_to_string(device_id, for_retail_display)
