"""Core module for device inventory, matching and change detection."""

from .config import Config, get_config
from .device_cache import DeviceCache
from .device_scanner import DeviceScanner
from .differ import compare_snapshots
from .interfaces import CapabilityProvider, DeviceHandle
from .models import DeviceRecord, SnapshotDiff
from .snapshot_builder import SnapshotBuilder
from .virtual_registry import VirtualDeviceRegistry

__all__ = [
    "Config",
    "get_config",
    "DeviceCache",
    "DeviceScanner",
    "compare_snapshots",
    "CapabilityProvider",
    "DeviceHandle",
    "DeviceRecord",
    "SnapshotDiff",
    "SnapshotBuilder",
    "VirtualDeviceRegistry",
]
