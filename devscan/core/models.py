"""
Data model for the device inventory.

A snapshot is an ordered sequence of DeviceRecord objects. Records are frozen
and snapshots are replaced wholesale, never edited in place.
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence

from .capabilities import AudioSource

DEVICE_ID_INVALID = 0
DEVICE_ID_NOTFOUND = 0xFFFFFFFF

# Ids that never count as an added or removed device
INVALID_DEVICE_IDS = frozenset({DEVICE_ID_INVALID, DEVICE_ID_NOTFOUND})


def is_valid_device_id(device_id: int) -> bool:
    """Check that a device id names a real model."""
    return device_id not in INVALID_DEVICE_IDS


@dataclass(frozen=True)
class AudioAttributes:
    """Audio capabilities derived during a scan."""
    sample_rates: tuple[int, ...] = ()
    num_channels: tuple[int, ...] = ()
    bits_per_sample: tuple[int, ...] = ()
    input_sources: tuple[AudioSource, ...] = ()
    output_sources: tuple[AudioSource, ...] = ()
    num_audio_streams: int = 0
    num_analog_input_channels: int = 0
    num_aes_input_channels: int = 0
    num_embedded_input_channels: int = 0
    num_hdmi_input_channels: int = 0
    num_analog_output_channels: int = 0
    num_aes_output_channels: int = 0
    num_embedded_output_channels: int = 0
    num_hdmi_output_channels: int = 0


@dataclass(frozen=True)
class DeviceCapabilities:
    """Video and format capabilities captured at scan time."""
    num_video_inputs: int = 0
    num_video_outputs: int = 0
    num_analog_video_inputs: int = 0
    num_analog_video_outputs: int = 0
    num_hdmi_video_inputs: int = 0
    num_hdmi_video_outputs: int = 0
    num_input_converters: int = 0
    num_output_converters: int = 0
    num_up_converters: int = 0
    num_down_converters: int = 0
    down_converter_delay: int = 0
    num_dma_engines: int = 0
    ping_led: int = 0
    num_serial_ports: int = 0
    dvcpro_hd_support: bool = False
    qrez_support: bool = False
    hdv_support: bool = False
    quarter_expand_support: bool = False
    color_correction_support: bool = False
    programmable_csc_support: bool = False
    rgb_alpha_output_support: bool = False
    breakout_box_support: bool = False
    video_processing_support: bool = False
    dual_link_support: bool = False
    proc_amp_support: bool = False
    has_2k_support: bool = False
    has_4k_support: bool = False
    has_8k_support: bool = False
    has_3g_level_conversion: bool = False
    iso_convert_support: bool = False
    rate_convert_support: bool = False
    prores_support: bool = False
    sdi_3g_support: bool = False
    sdi_12g_support: bool = False
    ip_support: bool = False
    bidirectional_sdi: bool = False
    ltc_in_support: bool = False
    ltc_out_support: bool = False
    ltc_in_on_ref_port: bool = False
    stereo_out_support: bool = False
    stereo_in_support: bool = False
    multi_format: bool = False


@dataclass(frozen=True)
class LegacyDeviceInfo:
    """Abbreviated record shape kept for older consumers."""
    device_id: int
    serial_number: int
    identifier: str
    is_virtual: bool = False
    virtual_name: str = ""
    virtual_id: str = ""


@dataclass(frozen=True)
class DeviceRecord:
    """One device present in a snapshot."""
    index: int
    device_id: int
    serial_number: int = 0
    display_name: str = ""
    pci_slot: int = 0
    capabilities: DeviceCapabilities = field(default_factory=DeviceCapabilities)
    audio: AudioAttributes = field(default_factory=AudioAttributes)
    is_virtual: bool = False
    virtual_id: str = ""
    virtual_name: str = ""

    def same_device(self, other: "DeviceRecord") -> bool:
        """Identity comparison used for change detection."""
        return (
            self.device_id == other.device_id
            and self.index == other.index
            and self.serial_number == other.serial_number
            and self.pci_slot == other.pci_slot
        )

    def as_legacy_view(self) -> LegacyDeviceInfo:
        return LegacyDeviceInfo(
            device_id=self.device_id,
            serial_number=self.serial_number,
            identifier=self.display_name,
            is_virtual=self.is_virtual,
            virtual_name=self.virtual_name,
            virtual_id=self.virtual_id,
        )


@dataclass(frozen=True)
class VirtualDeviceInfo:
    """Virtual device descriptor from the virtual device registry."""
    id: str
    name: str


@dataclass(frozen=True)
class SnapshotDiff:
    """Result of comparing two snapshots."""
    added: tuple[DeviceRecord, ...] = ()
    removed: tuple[DeviceRecord, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


Snapshot = Sequence[DeviceRecord]


def find_record(snapshot: Snapshot, index: int) -> Optional[DeviceRecord]:
    """Find a record by its own index rather than its position."""
    for record in snapshot:
        if record.index == index:
            return record
    return None
