"""
Device Cache for the device scanner.

Owns the current device snapshot behind a single lock and provides
on-demand rescans plus background hot-plug monitoring.
"""

import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from loguru import logger

from .differ import compare_snapshots
from .models import DeviceRecord, SnapshotDiff
from .snapshot_builder import SnapshotBuilder


class DeviceCache:
    """
    Lock-protected snapshot of attached devices.

    Provides:
    - Full (non-incremental) rescans that replace the snapshot atomically
    - Copies of the snapshot that are safe to use without the lock
    - Hot-plug monitoring with change callbacks

    The lock is not reentrant: a caller already inside ``locked()`` must not
    call another public method of the same cache.
    """

    def __init__(
        self,
        builder: SnapshotBuilder,
        on_change: Optional[Callable[[SnapshotDiff], None]] = None
    ):
        """
        Initialize the device cache.

        Args:
            builder: Snapshot builder used by every rescan
            on_change: Callback for changes found by the monitor thread
        """
        self.builder = builder
        self.on_change = on_change

        self._records: tuple[DeviceRecord, ...] = ()
        self._lock = threading.Lock()

        self._monitor_thread: Optional[threading.Thread] = None
        self._stop_monitoring = threading.Event()

    def rescan(self) -> None:
        """Rebuild the snapshot from scratch."""
        with self._lock:
            self._rescan_locked()

    def _rescan_locked(self) -> None:
        # A failed build leaves the previous snapshot in place
        records = tuple(self.builder.build())
        self._records = records

    def count(self) -> int:
        """Number of devices in the current snapshot."""
        with self._lock:
            return len(self._records)

    def snapshot(self) -> list[DeviceRecord]:
        """Copy of the current snapshot."""
        with self._lock:
            return list(self._records)

    @contextmanager
    def locked(self, rescan: bool = True) -> Iterator[tuple[DeviceRecord, ...]]:
        """
        Hold the lock for a whole match-and-open sequence.

        Args:
            rescan: Rebuild the snapshot before yielding it.

        Yields:
            The snapshot, which cannot change until the block exits.
        """
        with self._lock:
            if rescan:
                self._rescan_locked()
            yield self._records

    def rescan_and_compare(self) -> SnapshotDiff:
        """Rescan and report what changed since the previous snapshot."""
        with self._lock:
            old = self._records
            self._rescan_locked()
            return compare_snapshots(old, self._records)

    def start_monitoring(
        self,
        interval: float = 2.0,
        on_change: Optional[Callable[[SnapshotDiff], None]] = None
    ) -> None:
        """
        Start background device monitoring for hot-plug detection.

        Args:
            interval: Monitoring interval in seconds.
            on_change: Replaces the change callback given at construction.
        """
        if on_change is not None:
            self.on_change = on_change

        if self._monitor_thread is not None and self._monitor_thread.is_alive():
            return

        self._stop_monitoring.clear()
        self._monitor_thread = threading.Thread(
            target=self._monitor_devices,
            args=(interval,),
            daemon=True,
            name="DeviceMonitor"
        )
        self._monitor_thread.start()
        logger.info(f"Started device monitoring (every {interval}s)")

    def stop_monitoring(self) -> None:
        """Stop background device monitoring."""
        self._stop_monitoring.set()
        if self._monitor_thread is not None:
            self._monitor_thread.join(timeout=2.0)
            self._monitor_thread = None
        logger.info("Stopped device monitoring")

    @property
    def is_monitoring(self) -> bool:
        return self._monitor_thread is not None and self._monitor_thread.is_alive()

    def _monitor_devices(self, interval: float) -> None:
        """Background device monitoring loop."""
        while not self._stop_monitoring.wait(interval):
            try:
                diff = self.rescan_and_compare()
                if not diff.changed:
                    continue
                for record in diff.removed:
                    logger.warning(f"Device removed: {record.display_name}")
                for record in diff.added:
                    logger.info(f"Device added: {record.display_name}")
                if self.on_change:
                    self.on_change(diff)
            except Exception as e:
                logger.error(f"Error in device monitoring: {e}")

    def __enter__(self):
        self.rescan()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop_monitoring()
        return False
