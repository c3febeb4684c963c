"""Tests for SnapshotBuilder."""

from devscan.core.capabilities import AudioSource, DeviceCount, DeviceFeature
from devscan.core.snapshot_builder import SnapshotBuilder
from devscan.core.virtual_registry import VirtualDeviceRegistry
from devscan.drivers.device_ids import DeviceID
from devscan.drivers.simulated import SimulatedBus, SimulatedDevice

from conftest import DNXIV_SERIAL, KONA4_SERIAL


class TestPhysicalScan:

    def test_records_in_slot_order(self, builder):
        records = builder.scan_physical()

        assert [r.index for r in records] == [0, 1]
        assert [r.display_name for r in records] == ["Kona4 - 0", "Avid DNxIV - 1"]
        assert [r.device_id for r in records] == [DeviceID.KONA4, DeviceID.IO4KPLUS]

    def test_every_handle_is_closed(self, bus, builder):
        builder.build()

        assert bus.open_count > 0
        assert bus.open_handles == 0

    def test_empty_bus(self, capabilities):
        builder = SnapshotBuilder(SimulatedBus().create_handle, capabilities)

        assert builder.build() == []

    def test_sentinel_slot_is_skipped(self, kona4, dnxiv, capabilities):
        bus = SimulatedBus([kona4, SimulatedDevice(device_id=DeviceID.NOTFOUND), dnxiv])
        builder = SnapshotBuilder(bus.create_handle, capabilities)

        records = builder.build()

        assert [r.index for r in records] == [0, 2]
        assert records[1].display_name == "Avid DNxIV - 2"
        assert bus.open_handles == 0

    def test_max_slots_bounds_probing(self, bus, capabilities):
        builder = SnapshotBuilder(bus.create_handle, capabilities, max_slots=1)

        records = builder.build()

        assert len(records) == 1
        assert bus.opened_specifiers == [0]

    def test_serial_number_captured(self, builder):
        kona, dnxiv = builder.scan_physical()

        assert kona.serial_number != 0
        assert kona.serial_number != dnxiv.serial_number

    def test_microphone_selects_retail_name(self, capabilities):
        device = SimulatedDevice(
            device_id=DeviceID.KONA4,
            features=frozenset({DeviceFeature.HAS_MICROPHONE_INPUT}),
        )
        builder = SnapshotBuilder(SimulatedBus([device]).create_handle, capabilities)

        assert builder.build()[0].display_name == "KONA 4 - 0"


class TestCapabilities:

    def test_counts_and_features(self, builder):
        kona, dnxiv = builder.scan_physical()

        assert kona.capabilities.num_video_inputs == 4
        assert kona.capabilities.num_video_outputs == 4
        assert kona.capabilities.has_4k_support is True
        assert kona.capabilities.sdi_12g_support is True
        assert kona.capabilities.has_8k_support is False
        assert dnxiv.capabilities.num_hdmi_video_outputs == 1
        assert dnxiv.capabilities.sdi_12g_support is False

    def test_ltc_flags_follow_counts(self, builder):
        kona, dnxiv = builder.scan_physical()

        assert kona.capabilities.ltc_in_support is True
        assert kona.capabilities.ltc_out_support is False
        assert dnxiv.capabilities.ltc_in_support is False

    def test_proc_amp_never_reported(self, builder):
        assert not any(r.capabilities.proc_amp_support for r in builder.scan_physical())


class TestAudioAttributes:

    def test_device_with_audio_systems(self, builder):
        audio = builder.scan_physical()[0].audio

        assert audio.sample_rates == (48000, 96000)
        assert audio.bits_per_sample == (32,)
        assert audio.input_sources == (AudioSource.SDI, AudioSource.AES)
        assert audio.output_sources == (AudioSource.ALL,)
        assert audio.num_channels == (8,)
        assert audio.num_audio_streams == 4
        assert audio.num_embedded_input_channels == 16

    def test_device_without_audio_systems(self, builder):
        audio = builder.scan_physical()[1].audio

        assert audio.sample_rates == ()
        assert audio.input_sources == ()
        assert audio.output_sources == ()
        assert audio.num_audio_streams == 0

    def test_channel_counts_reported_without_audio_systems(self, capabilities):
        device = SimulatedDevice(
            device_id=DeviceID.KONA1,
            counts={DeviceCount.NUM_HDMI_AUDIO_OUTPUT_CHANNELS: 8},
        )
        builder = SnapshotBuilder(SimulatedBus([device]).create_handle, capabilities)

        audio = builder.build()[0].audio

        assert audio.num_hdmi_output_channels == 8
        assert audio.sample_rates == ()

    def test_analog_source_and_channel_list(self, capabilities):
        device = SimulatedDevice(
            device_id=DeviceID.IO4K,
            features=frozenset({
                DeviceFeature.CAN_DO_ANALOG_AUDIO,
                DeviceFeature.CAN_DO_AUDIO_2_CHANNELS,
                DeviceFeature.CAN_DO_AUDIO_6_CHANNELS,
            }),
            counts={DeviceCount.NUM_AUDIO_SYSTEMS: 1},
        )
        builder = SnapshotBuilder(SimulatedBus([device]).create_handle, capabilities)

        audio = builder.build()[0].audio

        assert audio.sample_rates == (48000,)
        assert audio.input_sources == (AudioSource.SDI, AudioSource.ANALOG)
        assert audio.num_channels == (2, 6)


class TestVirtualDevices:

    def test_virtual_records_follow_physical(self, builder):
        records = builder.build()

        assert [r.index for r in records] == [0, 1, 100, 101]
        assert [r.is_virtual for r in records] == [False, False, True, True]
        assert records[2].virtual_id == "vd-1"
        assert records[2].virtual_name == "StudioA"
        assert records[3].virtual_id == "vd-2"
        assert records[3].virtual_name == "StudioB"

    def test_virtual_record_copies_physical_fields(self, builder):
        kona, _, studio_a, _ = builder.build()

        assert studio_a.device_id == kona.device_id
        assert studio_a.serial_number == kona.serial_number
        assert studio_a.display_name == kona.display_name
        assert studio_a.capabilities == kona.capabilities

    def test_custom_virtual_index_base(self, bus, capabilities, registry):
        builder = SnapshotBuilder(
            bus.create_handle, capabilities, virtual_registry=registry, virtual_index_base=200
        )

        assert [r.index for r in builder.build()][2:] == [200, 201]

    def test_no_registry(self, bus, capabilities):
        builder = SnapshotBuilder(bus.create_handle, capabilities)

        assert not any(r.is_virtual for r in builder.build())

    def test_missing_registry_file(self, bus, capabilities, tmp_path):
        registry = VirtualDeviceRegistry(tmp_path / "absent.json")
        builder = SnapshotBuilder(bus.create_handle, capabilities, virtual_registry=registry)

        assert len(builder.build()) == 2

    def test_virtual_devices_only_for_registered_serial(self, bus, builder):
        records = builder.build()
        virtual_serials = {r.serial_number for r in records if r.is_virtual}

        assert virtual_serials == {bus.device_at(0).serial_number}
        assert bus.device_at(0).serial == KONA4_SERIAL
        assert bus.device_at(1).serial == DNXIV_SERIAL
