"""
Capability tags queried through a CapabilityProvider during a scan.

Boolean features are answered by ``is_supported``; numeric attributes by
``get_num_supported``.
"""

from enum import Enum, IntEnum


class DeviceFeature(Enum):
    """Boolean device capabilities."""
    CAN_DO_DVCPRO_HD = "dvcpro_hd"
    CAN_DO_QREZ = "qrez"
    CAN_DO_HDV = "hdv"
    CAN_DO_QUARTER_EXPAND = "quarter_expand"
    CAN_DO_COLOR_CORRECTION = "color_correction"
    CAN_DO_PROGRAMMABLE_CSC = "programmable_csc"
    CAN_DO_RGB_PLUS_ALPHA_OUT = "rgb_plus_alpha_out"
    CAN_DO_BREAKOUT_BOX = "breakout_box"
    CAN_DO_VIDEO_PROCESSING = "video_processing"
    CAN_DO_DUAL_LINK = "dual_link"
    CAN_DO_2K_VIDEO = "2k_video"
    CAN_DO_4K_VIDEO = "4k_video"
    CAN_DO_8K_VIDEO = "8k_video"
    CAN_DO_3G_LEVEL_CONVERSION = "3g_level_conversion"
    CAN_DO_ISO_CONVERT = "iso_convert"
    CAN_DO_RATE_CONVERT = "rate_convert"
    CAN_DO_PRORES = "prores"
    HAS_3G_SDI_OUTPUT = "3g_sdi_output"
    CAN_DO_12G_SDI = "12g_sdi"
    CAN_DO_IP = "ip"
    HAS_BIDIRECTIONAL_SDI = "bidirectional_sdi"
    CAN_DO_LTC_IN_ON_REF_PORT = "ltc_in_on_ref_port"
    CAN_DO_STEREO_OUT = "stereo_out"
    CAN_DO_STEREO_IN = "stereo_in"
    CAN_DO_MULTI_FORMAT = "multi_format"
    HAS_MICROPHONE_INPUT = "microphone_input"
    # Audio
    CAN_DO_AUDIO_96K = "audio_96k"
    CAN_DO_AES_AUDIO = "aes_audio"
    CAN_DO_ANALOG_AUDIO = "analog_audio"
    CAN_DO_AUDIO_2_CHANNELS = "audio_2_channels"
    CAN_DO_AUDIO_6_CHANNELS = "audio_6_channels"
    CAN_DO_AUDIO_8_CHANNELS = "audio_8_channels"


class DeviceCount(Enum):
    """Numeric device attributes."""
    NUM_VIDEO_INPUTS = "video_inputs"
    NUM_VIDEO_OUTPUTS = "video_outputs"
    NUM_ANALOG_VIDEO_INPUTS = "analog_video_inputs"
    NUM_ANALOG_VIDEO_OUTPUTS = "analog_video_outputs"
    NUM_HDMI_VIDEO_INPUTS = "hdmi_video_inputs"
    NUM_HDMI_VIDEO_OUTPUTS = "hdmi_video_outputs"
    NUM_INPUT_CONVERTERS = "input_converters"
    NUM_OUTPUT_CONVERTERS = "output_converters"
    NUM_UP_CONVERTERS = "up_converters"
    NUM_DOWN_CONVERTERS = "down_converters"
    DOWN_CONVERTER_DELAY = "down_converter_delay"
    NUM_DMA_ENGINES = "dma_engines"
    PING_LED = "ping_led"
    NUM_LTC_INPUTS = "ltc_inputs"
    NUM_LTC_OUTPUTS = "ltc_outputs"
    NUM_SERIAL_PORTS = "serial_ports"
    # Audio
    NUM_AUDIO_SYSTEMS = "audio_systems"
    NUM_ANALOG_AUDIO_INPUT_CHANNELS = "analog_audio_input_channels"
    NUM_AES_AUDIO_INPUT_CHANNELS = "aes_audio_input_channels"
    NUM_EMBEDDED_AUDIO_INPUT_CHANNELS = "embedded_audio_input_channels"
    NUM_HDMI_AUDIO_INPUT_CHANNELS = "hdmi_audio_input_channels"
    NUM_ANALOG_AUDIO_OUTPUT_CHANNELS = "analog_audio_output_channels"
    NUM_AES_AUDIO_OUTPUT_CHANNELS = "aes_audio_output_channels"
    NUM_EMBEDDED_AUDIO_OUTPUT_CHANNELS = "embedded_audio_output_channels"
    NUM_HDMI_AUDIO_OUTPUT_CHANNELS = "hdmi_audio_output_channels"


class AudioSource(Enum):
    """Audio input/output source."""
    SDI = "SDI"
    AES = "AES"
    ADAT = "ADAT"
    ANALOG = "Analog"
    NONE = "None"
    ALL = "All"


class AudioSampleRate(IntEnum):
    RATE_48K = 48000
    RATE_96K = 96000


class AudioChannels(IntEnum):
    CHANNELS_2 = 2
    CHANNELS_6 = 6
    CHANNELS_8 = 8


class AudioBitsPerSample(IntEnum):
    BITS_32 = 32
