"""Positional comparison of two device snapshots."""

from itertools import zip_longest

from .models import DeviceRecord, Snapshot, SnapshotDiff, is_valid_device_id


def compare_snapshots(old: Snapshot, new: Snapshot) -> SnapshotDiff:
    """
    Compare two snapshots position by position.

    Both snapshots must follow the same scan ordering (e.g. before and after
    one rescan). A position whose records differ reports the old record as
    removed and the new one as added; extra positions on either side are
    removed or added outright. Records with an invalid device id are never
    reported on either side.

    Args:
        old: Previous snapshot
        new: Current snapshot

    Returns:
        SnapshotDiff with the added and removed records.
    """
    added: list[DeviceRecord] = []
    removed: list[DeviceRecord] = []

    for old_record, new_record in zip_longest(old, new):
        if old_record is not None and new_record is not None and old_record.same_device(new_record):
            continue
        if old_record is not None and is_valid_device_id(old_record.device_id):
            removed.append(old_record)
        if new_record is not None and is_valid_device_id(new_record.device_id):
            added.append(new_record)

    return SnapshotDiff(added=tuple(added), removed=tuple(removed))
