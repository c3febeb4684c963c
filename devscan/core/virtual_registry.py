"""
Virtual Device Registry for the device scanner.

Maps a physical device's serial number string to the virtual devices
layered on top of it. The registry is read from the control panel
configuration file; a missing or unreadable file simply means there are no
virtual devices.

Expected layout (JSON or YAML):

    v2:
      deviceConfigList:
        - serial: "1A234567"
          virtualDevices:
            - {id: "vd-1", name: "Studio A"}
"""

import json
from pathlib import Path
from typing import Optional

import yaml
from loguru import logger

from .models import VirtualDeviceInfo


class RegistryError(Exception):
    """Raised when the registry file cannot be interpreted."""


class VirtualDeviceRegistry:
    """
    Lazily loaded serial -> virtual devices map.

    The file is parsed on first use and parsed again whenever its
    modification time changes.
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the virtual device registry.

        Args:
            config_path: Path to the control panel configuration file.
        """
        self.config_path = Path(config_path).expanduser()
        self._devices: dict[str, tuple[VirtualDeviceInfo, ...]] = {}
        self._loaded_mtime: Optional[float] = None

    @property
    def path(self) -> Path:
        return self.config_path

    def load(self, force: bool = False) -> dict[str, tuple[VirtualDeviceInfo, ...]]:
        """
        Load the registry if it changed since the last load.

        Args:
            force: Re-read the file even if its modification time is unchanged.

        Returns:
            Mapping of physical serial string to its virtual devices. Empty if
            the file is missing or malformed.
        """
        try:
            mtime = self.config_path.stat().st_mtime
        except OSError:
            if self._loaded_mtime is not None or self._devices:
                logger.info(f"Virtual device registry removed: {self.config_path}")
            else:
                logger.debug(f"No virtual device registry at {self.config_path}")
            self._devices = {}
            self._loaded_mtime = None
            return self._devices

        if not force and mtime == self._loaded_mtime:
            return self._devices

        try:
            self._devices = self._parse(self._read())
            logger.debug(
                f"Loaded virtual devices for {len(self._devices)} serial(s) "
                f"from {self.config_path}"
            )
        except (OSError, ValueError, yaml.YAMLError, RegistryError) as e:
            logger.warning(f"Ignoring virtual device registry {self.config_path}: {e}")
            self._devices = {}

        self._loaded_mtime = mtime
        return self._devices

    def _read(self) -> object:
        with open(self.config_path, "r", encoding="utf-8") as f:
            if self.config_path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)

    @staticmethod
    def _parse(data: object) -> dict[str, tuple[VirtualDeviceInfo, ...]]:
        """Build the serial map from decoded file content."""
        if not isinstance(data, dict):
            raise RegistryError("top level is not a mapping")
        section = data.get("v2")
        if not isinstance(section, dict):
            raise RegistryError("missing 'v2' section")
        config_list = section.get("deviceConfigList") or []
        if not isinstance(config_list, list):
            raise RegistryError("'deviceConfigList' is not a list")

        devices: dict[str, tuple[VirtualDeviceInfo, ...]] = {}
        for hw_device in config_list:
            if not isinstance(hw_device, dict):
                raise RegistryError(f"bad device entry: {hw_device!r}")
            entries = hw_device.get("virtualDevices") or []
            if not isinstance(entries, list):
                raise RegistryError(f"'virtualDevices' is not a list: {entries!r}")
            vdevs = []
            for vdev in entries:
                if not isinstance(vdev, dict) or "id" not in vdev or "name" not in vdev:
                    raise RegistryError(f"bad virtual device entry: {vdev!r}")
                vdevs.append(VirtualDeviceInfo(id=str(vdev["id"]), name=str(vdev["name"])))
            if vdevs:
                serial = hw_device.get("serial")
                if not isinstance(serial, (str, int)) or isinstance(serial, bool):
                    raise RegistryError(f"bad 'serial' in device entry: {serial!r}")
                devices[str(serial)] = tuple(vdevs)
        return devices

    def devices_for_serial(self, serial: str) -> tuple[VirtualDeviceInfo, ...]:
        """Get the virtual devices layered on a physical serial number."""
        if not serial:
            return ()
        return self.load().get(serial, ())

    def get_summary(self) -> dict:
        devices = self.load()
        return {
            "path": str(self.config_path),
            "physical_devices": len(devices),
            "virtual_devices": sum(len(v) for v in devices.values()),
        }
