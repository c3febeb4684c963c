"""
Device Scanner - resolves and opens devices against a fresh snapshot.

Every lookup holds the cache lock from the rescan through the device open,
so the device that matched is the device that gets opened.
"""

from typing import Any, Callable, Optional, Union

from loguru import logger

from .device_cache import DeviceCache
from .formatting import format_device_listing
from .interfaces import CapabilityProvider, DeviceHandle, HandleFactory
from .matcher import (
    find_by_id,
    find_by_name,
    find_by_serial_number,
    find_virtual,
    is_list_request,
    physical_records,
    record_at_index,
    serial_matches,
)
from .models import DeviceRecord
from .snapshot_builder import SnapshotBuilder
from .validation import is_alpha_numeric, serial_number_to_string
from .virtual_registry import VirtualDeviceRegistry

UNKNOWN_MODEL_NAME = "???"


class DeviceScanner:
    """
    Finds devices by index, id, name, serial or free-form argument.

    Lookups that open a device always rescan first. Read-only lookups
    (``get_device_info``, ``device_id_present``) rescan unless told not to.
    """

    def __init__(
        self,
        cache: DeviceCache,
        handle_factory: HandleFactory,
        capabilities: CapabilityProvider,
        virtual_registry: Optional[VirtualDeviceRegistry] = None,
        virtual_url_scheme: str = "ntv2virtualdev",
        rescan_on_query: bool = True,
        listing_sink: Callable[[str], Any] = print
    ):
        """
        Initialize the device scanner.

        Args:
            cache: Device cache holding the snapshot
            handle_factory: Creates unopened device handles
            capabilities: Capability provider (used for model names)
            virtual_registry: Registry whose path is embedded in virtual specifiers
            virtual_url_scheme: Scheme of virtual device connection specifiers
            rescan_on_query: Default rescan policy for read-only lookups
            listing_sink: Receives the text produced by a LIST request
        """
        self.cache = cache
        self.handle_factory = handle_factory
        self.capabilities = capabilities
        self.virtual_registry = virtual_registry
        self.virtual_url_scheme = virtual_url_scheme
        self.rescan_on_query = rescan_on_query
        self.listing_sink = listing_sink

    @classmethod
    def from_config(
        cls,
        config,
        handle_factory: HandleFactory,
        capabilities: CapabilityProvider,
        **kwargs
    ) -> "DeviceScanner":
        """
        Compose a scanner, cache, builder and registry from configuration.

        Args:
            config: devscan Config object
            handle_factory: Creates unopened device handles
            capabilities: Capability provider
            **kwargs: Passed through to the DeviceScanner constructor
        """
        registry = None
        if config.virtual_devices.enabled:
            registry = VirtualDeviceRegistry(config.virtual_devices.config_path)

        builder = SnapshotBuilder(
            handle_factory,
            capabilities,
            virtual_registry=registry,
            max_slots=config.scanner.max_slots,
            virtual_index_base=config.scanner.virtual_index_base,
        )
        return cls(
            DeviceCache(builder),
            handle_factory,
            capabilities,
            virtual_registry=registry,
            virtual_url_scheme=config.virtual_devices.url_scheme,
            rescan_on_query=config.scanner.rescan_on_query,
            **kwargs
        )

    def _should_rescan(self, rescan: Optional[bool]) -> bool:
        return self.rescan_on_query if rescan is None else rescan

    # Cache accessors

    def rescan(self) -> None:
        self.cache.rescan()

    def get_num_devices(self) -> int:
        return self.cache.count()

    def get_device_info_list(self) -> list[DeviceRecord]:
        return self.cache.snapshot()

    def get_device_info(self, index: int, rescan: Optional[bool] = None) -> Optional[DeviceRecord]:
        """Record at ``index`` if the position exists and carries that index."""
        with self.cache.locked(self._should_rescan(rescan)) as snapshot:
            return record_at_index(snapshot, index)

    def device_id_present(self, device_id: int, rescan: Optional[bool] = None) -> bool:
        with self.cache.locked(self._should_rescan(rescan)) as snapshot:
            return find_by_id(snapshot, device_id) is not None

    # Opening

    def _open(self, index_or_specifier: Union[int, str]) -> Optional[DeviceHandle]:
        handle = self.handle_factory()
        if handle.open(index_or_specifier):
            return handle
        logger.warning(f"Failed to open device {index_or_specifier!r}")
        return None

    def _open_record(self, record: DeviceRecord) -> Optional[DeviceHandle]:
        if record.is_virtual:
            return self._open(self.virtual_device_specifier(record))
        return self._open(record.index)

    def virtual_device_specifier(self, record: DeviceRecord) -> str:
        """Connection specifier that opens a virtual device."""
        config_path = self.virtual_registry.path if self.virtual_registry is not None else ""
        return (
            f"{self.virtual_url_scheme}://localhost/?CP2ConfigPath={config_path}"
            f"&DeviceSN={serial_number_to_string(record.serial_number)}"
            f"&vdid={record.virtual_id}"
            f"&verbose"
        )

    # Lookups

    def get_device_at_index(self, index: int) -> Optional[DeviceHandle]:
        with self.cache.locked() as snapshot:
            record = record_at_index(snapshot, index)
            if record is None:
                logger.debug(f"No device at index {index}")
                return None
            return self._open_record(record)

    def get_first_device_with_id(self, device_id: int) -> Optional[DeviceHandle]:
        with self.cache.locked() as snapshot:
            record = find_by_id(snapshot, device_id)
            if record is None:
                logger.debug(f"No device with id 0x{device_id:08X}")
                return None
            return self._open_record(record)

    def get_first_device_with_name(self, name_substring: str) -> Optional[DeviceHandle]:
        """
        Open the first device whose display name contains ``name_substring``.

        A non-alphanumeric query is only accepted when it looks like a remote
        address (contains ':'); it is then opened directly without scanning.
        """
        if not is_alpha_numeric(name_substring):
            if ":" in name_substring:
                return self._open(name_substring)
            logger.debug(f"Rejected device name {name_substring!r}")
            return None

        with self.cache.locked() as snapshot:
            record = find_by_name(snapshot, name_substring)
            if record is None:
                logger.debug(f"No device named like {name_substring!r}")
                return None
            return self._open_record(record)

    def get_first_device_with_serial(self, serial_substring: str) -> Optional[DeviceHandle]:
        """Open the first device whose live serial string contains ``serial_substring``."""
        with self.cache.locked() as snapshot:
            for record in physical_records(snapshot):
                candidate = self.handle_factory()
                if not candidate.open(record.index):
                    continue
                try:
                    serial = candidate.get_serial_number_string()
                finally:
                    candidate.close()
                if serial_matches(serial, serial_substring):
                    return self._open_record(record)
        logger.debug(f"No device with serial like {serial_substring!r}")
        return None

    def get_device_with_serial(self, serial_number: int) -> Optional[DeviceHandle]:
        with self.cache.locked() as snapshot:
            record = find_by_serial_number(snapshot, serial_number)
            if record is None:
                logger.debug(f"No device with serial number 0x{serial_number:016X}")
                return None
            return self._open_record(record)

    def get_first_device_from_argument(self, argument: str) -> Optional[DeviceHandle]:
        """
        Resolve a free-form device argument.

        Precedence:
        1. ``LIST`` or ``?`` (any case): write a device listing and return None
        2. Exact index, name or id of a virtual device: open it through its
           virtual connection specifier
        3. Anything else is handed to the driver as a device specifier

        Args:
            argument: Text typed by a user or read from a settings file

        Returns:
            The opened device, or None.
        """
        if not argument:
            return None

        with self.cache.locked() as snapshot:
            if is_list_request(argument):
                self.listing_sink(
                    format_device_listing(snapshot, self.capabilities.device_id_to_string)
                )
                return None

            record = find_virtual(snapshot, argument)
            if record is not None:
                logger.debug(f"Argument {argument!r} names virtual device {record.virtual_id}")
                return self._open(self.virtual_device_specifier(record))

            return self._open(argument)

    def get_device_ref_name(self, handle: DeviceHandle) -> str:
        """
        Shortest argument that get_first_device_from_argument maps back to
        the same device: remote host, serial number, model name, then index.
        """
        if not handle.is_open():
            return ""

        host_name = handle.get_host_name()
        if host_name and handle.is_remote():
            return host_name

        serial = handle.get_serial_number_string()
        if serial:
            return serial

        model_name = self.capabilities.device_id_to_string(handle.get_device_id(), False)
        if model_name and model_name != UNKNOWN_MODEL_NAME:
            return model_name

        return str(handle.get_index_number())
