"""
Snapshot Builder for the device scanner.

Probes device slots from 0 upward through the driver, captures each present
device's capabilities and appends the virtual devices resolved from the
virtual device registry.
"""

from dataclasses import replace
from typing import Optional

from loguru import logger

from .capabilities import (
    AudioBitsPerSample,
    AudioChannels,
    AudioSampleRate,
    AudioSource,
    DeviceCount,
    DeviceFeature,
)
from .interfaces import CapabilityProvider, DeviceHandle, HandleFactory
from .models import (
    DEVICE_ID_NOTFOUND,
    AudioAttributes,
    DeviceCapabilities,
    DeviceRecord,
)
from .validation import serial_number_to_string
from .virtual_registry import VirtualDeviceRegistry

DEFAULT_MAX_SLOTS = 64
DEFAULT_VIRTUAL_INDEX_BASE = 100

# Record field -> numeric attribute
_COUNT_FIELDS = {
    "num_video_inputs": DeviceCount.NUM_VIDEO_INPUTS,
    "num_video_outputs": DeviceCount.NUM_VIDEO_OUTPUTS,
    "num_analog_video_outputs": DeviceCount.NUM_ANALOG_VIDEO_OUTPUTS,
    "num_analog_video_inputs": DeviceCount.NUM_ANALOG_VIDEO_INPUTS,
    "num_hdmi_video_outputs": DeviceCount.NUM_HDMI_VIDEO_OUTPUTS,
    "num_hdmi_video_inputs": DeviceCount.NUM_HDMI_VIDEO_INPUTS,
    "num_input_converters": DeviceCount.NUM_INPUT_CONVERTERS,
    "num_output_converters": DeviceCount.NUM_OUTPUT_CONVERTERS,
    "num_up_converters": DeviceCount.NUM_UP_CONVERTERS,
    "num_down_converters": DeviceCount.NUM_DOWN_CONVERTERS,
    "down_converter_delay": DeviceCount.DOWN_CONVERTER_DELAY,
    "num_dma_engines": DeviceCount.NUM_DMA_ENGINES,
    "ping_led": DeviceCount.PING_LED,
    "num_serial_ports": DeviceCount.NUM_SERIAL_PORTS,
}

# Record field -> boolean feature
_FEATURE_FIELDS = {
    "dvcpro_hd_support": DeviceFeature.CAN_DO_DVCPRO_HD,
    "qrez_support": DeviceFeature.CAN_DO_QREZ,
    "hdv_support": DeviceFeature.CAN_DO_HDV,
    "quarter_expand_support": DeviceFeature.CAN_DO_QUARTER_EXPAND,
    "color_correction_support": DeviceFeature.CAN_DO_COLOR_CORRECTION,
    "programmable_csc_support": DeviceFeature.CAN_DO_PROGRAMMABLE_CSC,
    "rgb_alpha_output_support": DeviceFeature.CAN_DO_RGB_PLUS_ALPHA_OUT,
    "breakout_box_support": DeviceFeature.CAN_DO_BREAKOUT_BOX,
    "video_processing_support": DeviceFeature.CAN_DO_VIDEO_PROCESSING,
    "dual_link_support": DeviceFeature.CAN_DO_DUAL_LINK,
    "has_2k_support": DeviceFeature.CAN_DO_2K_VIDEO,
    "has_4k_support": DeviceFeature.CAN_DO_4K_VIDEO,
    "has_8k_support": DeviceFeature.CAN_DO_8K_VIDEO,
    "has_3g_level_conversion": DeviceFeature.CAN_DO_3G_LEVEL_CONVERSION,
    "iso_convert_support": DeviceFeature.CAN_DO_ISO_CONVERT,
    "rate_convert_support": DeviceFeature.CAN_DO_RATE_CONVERT,
    "prores_support": DeviceFeature.CAN_DO_PRORES,
    "sdi_3g_support": DeviceFeature.HAS_3G_SDI_OUTPUT,
    "sdi_12g_support": DeviceFeature.CAN_DO_12G_SDI,
    "ip_support": DeviceFeature.CAN_DO_IP,
    "bidirectional_sdi": DeviceFeature.HAS_BIDIRECTIONAL_SDI,
    "ltc_in_on_ref_port": DeviceFeature.CAN_DO_LTC_IN_ON_REF_PORT,
    "stereo_out_support": DeviceFeature.CAN_DO_STEREO_OUT,
    "stereo_in_support": DeviceFeature.CAN_DO_STEREO_IN,
    "multi_format": DeviceFeature.CAN_DO_MULTI_FORMAT,
}

_AUDIO_CHANNEL_COUNT_FIELDS = {
    "num_analog_input_channels": DeviceCount.NUM_ANALOG_AUDIO_INPUT_CHANNELS,
    "num_aes_input_channels": DeviceCount.NUM_AES_AUDIO_INPUT_CHANNELS,
    "num_embedded_input_channels": DeviceCount.NUM_EMBEDDED_AUDIO_INPUT_CHANNELS,
    "num_hdmi_input_channels": DeviceCount.NUM_HDMI_AUDIO_INPUT_CHANNELS,
    "num_analog_output_channels": DeviceCount.NUM_ANALOG_AUDIO_OUTPUT_CHANNELS,
    "num_aes_output_channels": DeviceCount.NUM_AES_AUDIO_OUTPUT_CHANNELS,
    "num_embedded_output_channels": DeviceCount.NUM_EMBEDDED_AUDIO_OUTPUT_CHANNELS,
    "num_hdmi_output_channels": DeviceCount.NUM_HDMI_AUDIO_OUTPUT_CHANNELS,
}

_CHANNEL_FEATURES = (
    (DeviceFeature.CAN_DO_AUDIO_2_CHANNELS, AudioChannels.CHANNELS_2),
    (DeviceFeature.CAN_DO_AUDIO_6_CHANNELS, AudioChannels.CHANNELS_6),
    (DeviceFeature.CAN_DO_AUDIO_8_CHANNELS, AudioChannels.CHANNELS_8),
)


def _append_unique(items: list, value) -> None:
    if value not in items:
        items.append(value)


class SnapshotBuilder:
    """
    Builds a fresh snapshot of attached devices.

    Slots are assumed densely packed from 0: enumeration stops at the first
    slot that fails to open.
    """

    def __init__(
        self,
        handle_factory: HandleFactory,
        capabilities: CapabilityProvider,
        virtual_registry: Optional[VirtualDeviceRegistry] = None,
        max_slots: int = DEFAULT_MAX_SLOTS,
        virtual_index_base: int = DEFAULT_VIRTUAL_INDEX_BASE,
    ):
        """
        Initialize the snapshot builder.

        Args:
            handle_factory: Creates a new unopened DeviceHandle
            capabilities: Capability provider used for every query
            virtual_registry: Optional source of virtual devices
            max_slots: Upper bound on slots to open
            virtual_index_base: First index assigned to virtual devices
        """
        self.handle_factory = handle_factory
        self.capabilities = capabilities
        self.virtual_registry = virtual_registry
        self.max_slots = max_slots
        self.virtual_index_base = virtual_index_base

    def build(self) -> list[DeviceRecord]:
        """
        Scan all slots and resolve virtual devices.

        Returns:
            Physical devices in slot order followed by virtual devices.
        """
        records = self.scan_physical()
        if self.virtual_registry is not None:
            records.extend(self.resolve_virtual(records))
        logger.debug(f"Snapshot built with {len(records)} device(s)")
        return records

    def scan_physical(self) -> list[DeviceRecord]:
        records = []
        for slot in range(self.max_slots):
            handle = self.handle_factory()
            if not handle.open(slot):
                break
            try:
                device_id = handle.get_device_id()
                if device_id == DEVICE_ID_NOTFOUND:
                    logger.debug(f"Slot {slot}: device id not found, skipping")
                    continue
                records.append(self._make_record(handle, slot, device_id))
            finally:
                handle.close()
        else:
            logger.warning(f"Stopped probing after {self.max_slots} slots")
        return records

    def _make_record(self, handle: DeviceHandle, slot: int, device_id: int) -> DeviceRecord:
        caps = self.capabilities
        model_name = caps.device_id_to_string(
            device_id, caps.is_supported(handle, DeviceFeature.HAS_MICROPHONE_INPUT)
        )

        values = {name: caps.get_num_supported(handle, tag) for name, tag in _COUNT_FIELDS.items()}
        values.update(
            {name: caps.is_supported(handle, tag) for name, tag in _FEATURE_FIELDS.items()}
        )
        values["ltc_in_support"] = caps.get_num_supported(handle, DeviceCount.NUM_LTC_INPUTS) > 0
        values["ltc_out_support"] = caps.get_num_supported(handle, DeviceCount.NUM_LTC_OUTPUTS) > 0
        values["proc_amp_support"] = False

        return DeviceRecord(
            index=slot,
            device_id=device_id,
            serial_number=handle.get_serial_number(),
            display_name=f"{model_name} - {slot}",
            capabilities=DeviceCapabilities(**values),
            audio=self.audio_attributes(handle),
        )

    def audio_attributes(self, handle: DeviceHandle) -> AudioAttributes:
        """Derive the supported audio formats and sources of a device."""
        caps = self.capabilities
        sample_rates: list[int] = []
        num_channels: list[int] = []
        bits_per_sample: list[int] = []
        input_sources: list[AudioSource] = []
        output_sources: list[AudioSource] = []
        num_streams = 0

        num_audio_systems = caps.get_num_supported(handle, DeviceCount.NUM_AUDIO_SYSTEMS)
        if num_audio_systems:
            _append_unique(sample_rates, int(AudioSampleRate.RATE_48K))
            if caps.is_supported(handle, DeviceFeature.CAN_DO_AUDIO_96K):
                _append_unique(sample_rates, int(AudioSampleRate.RATE_96K))

            _append_unique(bits_per_sample, int(AudioBitsPerSample.BITS_32))

            _append_unique(input_sources, AudioSource.SDI)
            if caps.is_supported(handle, DeviceFeature.CAN_DO_AES_AUDIO):
                _append_unique(input_sources, AudioSource.AES)
            if caps.is_supported(handle, DeviceFeature.CAN_DO_ANALOG_AUDIO):
                _append_unique(input_sources, AudioSource.ANALOG)

            _append_unique(output_sources, AudioSource.ALL)

            for feature, channels in _CHANNEL_FEATURES:
                if caps.is_supported(handle, feature):
                    _append_unique(num_channels, int(channels))

            num_streams = num_audio_systems

        channel_counts = {
            name: caps.get_num_supported(handle, tag)
            for name, tag in _AUDIO_CHANNEL_COUNT_FIELDS.items()
        }
        return AudioAttributes(
            sample_rates=tuple(sample_rates),
            num_channels=tuple(num_channels),
            bits_per_sample=tuple(bits_per_sample),
            input_sources=tuple(input_sources),
            output_sources=tuple(output_sources),
            num_audio_streams=num_streams,
            **channel_counts,
        )

    def resolve_virtual(self, physical: list[DeviceRecord]) -> list[DeviceRecord]:
        """Synthesize records for virtual devices layered on physical ones."""
        virtual = []
        next_index = self.virtual_index_base
        for record in physical:
            serial = serial_number_to_string(record.serial_number)
            for vdev in self.virtual_registry.devices_for_serial(serial):
                virtual.append(
                    replace(
                        record,
                        index=next_index,
                        is_virtual=True,
                        virtual_id=vdev.id,
                        virtual_name=vdev.name,
                    )
                )
                next_index += 1
        if virtual:
            logger.debug(f"Resolved {len(virtual)} virtual device(s)")
        return virtual
