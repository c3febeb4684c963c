"""
Text formatting for device snapshots.

Pure functions returning strings; callers decide where the text goes.
"""

from typing import Callable, Iterable

from .capabilities import AudioSource
from .models import DeviceRecord, Snapshot
from .validation import serial_number_to_string

IdToString = Callable[[int], str]


def _yes_no(value: bool) -> str:
    return "Y" if value else "N"


def _join(values: Iterable) -> str:
    return " ".join(str(v.value if isinstance(v, AudioSource) else v) for v in values)


def format_device_listing(snapshot: Snapshot, id_to_string: IdToString) -> str:
    """
    Render the enumeration printed for a ``LIST`` / ``?`` request.

    Args:
        snapshot: Devices to list
        id_to_string: Device id -> model name

    Returns:
        One line per device, physical devices first.
    """
    physical = [r for r in snapshot if not r.is_virtual]
    virtual = [r for r in snapshot if r.is_virtual]

    # The header counts virtual devices too
    if not snapshot:
        lines = ["No devices detected"]
    else:
        noun = "device:" if len(snapshot) == 1 else "devices:"
        lines = [f"{len(snapshot)} available {noun}"]

    for position, record in enumerate(physical):
        line = f"{position:2d} | {id_to_string(record.device_id):>8}"
        serial = serial_number_to_string(record.serial_number)
        if serial:
            line += f" | {serial:>9} | {record.serial_number:08X}"
        lines.append(line)

    if virtual:
        lines.append("*** Virtual Devices ***")
        for record in virtual:
            line = (
                f"{record.index:2d} | {record.virtual_name:>15} | {record.virtual_id}"
                f" ({id_to_string(record.device_id)}"
            )
            serial = serial_number_to_string(record.serial_number)
            if serial:
                line += f" {serial}"
            lines.append(line + ")")

    return "\n".join(lines)


def format_device_record(record: DeviceRecord, verbose: bool = False) -> str:
    """Multi-line description of one device record."""
    caps = record.capabilities
    lines = [
        f"Device Info for '{record.display_name}'",
        f"{'Device Index Number':>31}: {record.index}",
        f"{'Device ID':>31}: 0x{record.device_id:x}",
        f"{'Serial Number':>31}: 0x{record.serial_number:x}",
        f"{'PCI Slot':>31}: 0x{record.pci_slot:x}",
        f"{'Video Inputs':>31}: {caps.num_video_inputs}",
        f"{'Video Outputs':>31}: {caps.num_video_outputs}",
    ]
    if record.is_virtual:
        lines.append(f"{'Virtual Device':>31}: {record.virtual_name} ({record.virtual_id})")

    if verbose:
        audio = record.audio
        details = [
            ("Analog Video Inputs", caps.num_analog_video_inputs),
            ("Analog Video Outputs", caps.num_analog_video_outputs),
            ("HDMI Video Inputs", caps.num_hdmi_video_inputs),
            ("HDMI Video Outputs", caps.num_hdmi_video_outputs),
            ("Input Converters", caps.num_input_converters),
            ("Output Converters", caps.num_output_converters),
            ("Up Converters", caps.num_up_converters),
            ("Down Converters", caps.num_down_converters),
            ("Down Converter Delay", caps.down_converter_delay),
            ("DVCProHD", _yes_no(caps.dvcpro_hd_support)),
            ("Qrez", _yes_no(caps.qrez_support)),
            ("HDV", _yes_no(caps.hdv_support)),
            ("Quarter Expand", _yes_no(caps.quarter_expand_support)),
            ("ISO Convert", _yes_no(caps.iso_convert_support)),
            ("Rate Convert", _yes_no(caps.rate_convert_support)),
            ("VidProc", _yes_no(caps.video_processing_support)),
            ("Dual-Link", _yes_no(caps.dual_link_support)),
            ("Color-Correction", _yes_no(caps.color_correction_support)),
            ("Programmable CSC", _yes_no(caps.programmable_csc_support)),
            ("RGB Alpha Output", _yes_no(caps.rgb_alpha_output_support)),
            ("Breakout Box", _yes_no(caps.breakout_box_support)),
            ("ProcAmp", _yes_no(caps.proc_amp_support)),
            ("2K", _yes_no(caps.has_2k_support)),
            ("4K", _yes_no(caps.has_4k_support)),
            ("8K", _yes_no(caps.has_8k_support)),
            ("3G Level Conversion", _yes_no(caps.has_3g_level_conversion)),
            ("ProRes", _yes_no(caps.prores_support)),
            ("SDI 3G", _yes_no(caps.sdi_3g_support)),
            ("SDI 12G", _yes_no(caps.sdi_12g_support)),
            ("IP", _yes_no(caps.ip_support)),
            ("SDI Bi-Directional", _yes_no(caps.bidirectional_sdi)),
            ("LTC In", _yes_no(caps.ltc_in_support)),
            ("LTC Out", _yes_no(caps.ltc_out_support)),
            ("LTC In on Ref Port", _yes_no(caps.ltc_in_on_ref_port)),
            ("Stereo Out", _yes_no(caps.stereo_out_support)),
            ("Stereo In", _yes_no(caps.stereo_in_support)),
            ("Audio Sample Rates", _join(audio.sample_rates)),
            ("AudioNumChannelsList", _join(audio.num_channels)),
            ("AudioBitsPerSampleList", _join(audio.bits_per_sample)),
            ("AudioInSourceList", _join(audio.input_sources)),
            ("AudioOutSourceList", _join(audio.output_sources)),
            ("Audio Streams", audio.num_audio_streams),
            ("Analog Audio Input Channels", audio.num_analog_input_channels),
            ("Analog Audio Output Channels", audio.num_analog_output_channels),
            ("AES Audio Input Channels", audio.num_aes_input_channels),
            ("AES Audio Output Channels", audio.num_aes_output_channels),
            ("Embedded Audio Input Channels", audio.num_embedded_input_channels),
            ("Embedded Audio Output Channels", audio.num_embedded_output_channels),
            ("HDMI Audio Input Channels", audio.num_hdmi_input_channels),
            ("HDMI Audio Output Channels", audio.num_hdmi_output_channels),
            ("DMA Engines", caps.num_dma_engines),
            ("Serial Ports", caps.num_serial_ports),
        ]
        lines.extend(f"{label:>31}: {value}" for label, value in details)

    return "\n".join(lines)
