"""
Device matching algorithms.

Every function here is pure: it inspects a snapshot and returns the matching
record (or None). Locking, rescanning and opening are left to DeviceScanner.
"""

from typing import Optional

from .models import DeviceRecord, Snapshot

# Side-channel arguments asking for a device listing instead of a device
LIST_TOKENS = frozenset({"LIST", "?"})

# Old product codename and the name the same hardware is reported under now
LEGACY_NAME_ALIAS = "io4kplus"
LEGACY_NAME_TARGET = "avid dnxiv"


def record_at_index(snapshot: Snapshot, index: int) -> Optional[DeviceRecord]:
    """
    Positional lookup that also checks the record's own index.

    Returns None for an out-of-range index or when the record at that
    position was assigned a different index.
    """
    if not 0 <= index < len(snapshot):
        return None
    record = snapshot[index]
    return record if record.index == index else None


def find_by_id(snapshot: Snapshot, device_id: int) -> Optional[DeviceRecord]:
    """First record, in snapshot order, with the given device id."""
    for record in snapshot:
        if record.device_id == device_id:
            return record
    return None


def _find_by_lowered_name(snapshot: Snapshot, lowered: str) -> Optional[DeviceRecord]:
    for record in snapshot:
        if lowered in record.display_name.lower():
            return record
    return None


def find_by_name(snapshot: Snapshot, name_substring: str) -> Optional[DeviceRecord]:
    """
    Case-insensitive substring search over display names.

    If nothing matches and the query is the legacy ``io4kplus`` codename, the
    search is retried once with the current product name.
    """
    lowered = name_substring.lower()
    record = _find_by_lowered_name(snapshot, lowered)
    if record is None and lowered == LEGACY_NAME_ALIAS:
        record = _find_by_lowered_name(snapshot, LEGACY_NAME_TARGET)
    return record


def serial_matches(serial: Optional[str], serial_substring: str) -> bool:
    """Case-insensitive containment test against a live serial string."""
    if serial is None:
        return False
    return serial_substring.lower() in serial.lower()


def find_by_serial_number(snapshot: Snapshot, serial_number: int) -> Optional[DeviceRecord]:
    """First record whose 64-bit serial number equals ``serial_number``."""
    for record in snapshot:
        if record.serial_number == serial_number:
            return record
    return None


def is_list_request(argument: str) -> bool:
    return argument.upper() in LIST_TOKENS


def find_virtual(snapshot: Snapshot, argument: str) -> Optional[DeviceRecord]:
    """Virtual record whose index, name or id equals ``argument`` exactly."""
    for record in snapshot:
        if not record.is_virtual:
            continue
        if argument in (str(record.index), record.virtual_name, record.virtual_id):
            return record
    return None


def physical_records(snapshot: Snapshot) -> list[DeviceRecord]:
    return [record for record in snapshot if not record.is_virtual]
