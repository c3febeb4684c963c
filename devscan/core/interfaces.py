"""
Driver-facing interfaces required by the scanner.

A driver package supplies a DeviceHandle implementation (one openable
reference to a physical or virtual device) and a CapabilityProvider that
answers feature/attribute queries for an open handle.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional, Union

from .capabilities import DeviceCount, DeviceFeature


class DeviceHandle(ABC):
    """Openable/closable reference to one device."""

    @abstractmethod
    def open(self, index_or_specifier: Union[int, str]) -> bool:
        """
        Open a device.

        Args:
            index_or_specifier: Slot index, or a textual specifier whose
                meaning (index, name, serial, remote address, virtual URL)
                is decided by the driver.

        Returns:
            True if the device was opened.
        """

    @abstractmethod
    def close(self) -> None:
        pass

    @abstractmethod
    def is_open(self) -> bool:
        pass

    @abstractmethod
    def get_device_id(self) -> int:
        pass

    @abstractmethod
    def get_serial_number(self) -> int:
        """64-bit serial number, 0 if unavailable."""

    @abstractmethod
    def get_serial_number_string(self) -> Optional[str]:
        """Serial number as text, or None when the device has none."""

    @abstractmethod
    def is_remote(self) -> bool:
        pass

    @abstractmethod
    def get_host_name(self) -> str:
        pass

    @abstractmethod
    def get_index_number(self) -> int:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class CapabilityProvider(ABC):
    """
    Answers capability queries for an open device handle.

    Implementations must never raise from a query; an unanswerable query is
    reported as unsupported (False / 0).
    """

    @abstractmethod
    def is_supported(self, handle: DeviceHandle, feature: DeviceFeature) -> bool:
        pass

    @abstractmethod
    def get_num_supported(self, handle: DeviceHandle, count: DeviceCount) -> int:
        pass

    @abstractmethod
    def device_id_to_string(self, device_id: int, for_retail_display: bool = False) -> str:
        """Model name for a device id ("???" when unknown)."""


# Creates a new, unopened handle
HandleFactory = Callable[[], DeviceHandle]
