"""Known device model ids and their display names."""

from enum import IntEnum


class DeviceID(IntEnum):
    """Device model codes reported by the driver."""
    CORVID1 = 0x10244800
    KONA4 = 0x10518400
    CORVID88 = 0x10538200
    CORVID44 = 0x10565400
    IO4K = 0x10478300
    IO4KPLUS = 0x10710800
    KONA1 = 0x10756600
    TTAP_PRO = 0x10879000
    IOX3 = 0x10920600
    NOTFOUND = 0xFFFFFFFF


# (short name, retail name)
_NAMES = {
    DeviceID.CORVID1: ("Corvid1", "Corvid 1"),
    DeviceID.KONA4: ("Kona4", "KONA 4"),
    DeviceID.CORVID88: ("Corvid88", "Corvid 88"),
    DeviceID.CORVID44: ("Corvid44", "Corvid 44"),
    DeviceID.IO4K: ("Io4K", "Io 4K"),
    DeviceID.IO4KPLUS: ("Avid DNxIV", "Avid DNxIV"),
    DeviceID.KONA1: ("Kona1", "KONA 1"),
    DeviceID.TTAP_PRO: ("TTapPro", "T-Tap Pro"),
    DeviceID.IOX3: ("IoX3", "Io X3"),
}


def device_id_to_string(device_id: int, for_retail_display: bool = False) -> str:
    """Display name of a device model, "???" if unknown."""
    try:
        short_name, retail_name = _NAMES[DeviceID(device_id)]
    except (ValueError, KeyError):
        return "???"
    return retail_name if for_retail_display else short_name
