#!/usr/bin/env python3
"""
devscan - Main Entry Point

Lists attached devices, resolves device arguments and watches for hot-plug
changes.
"""

import argparse
import sys
import time
from pathlib import Path
from loguru import logger
from rich.console import Console
from rich.table import Table


def setup_logging(log_level: str = "INFO", log_dir: str = "logs"):
    """Configure logging."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
    )

    # Create logs directory
    Path(log_dir).mkdir(parents=True, exist_ok=True)
    logger.add(
        str(Path(log_dir) / "devscan_{time}.log"),
        rotation="1 day",
        retention="7 days",
        level="DEBUG"
    )


def build_scanner(config, console: Console):
    """Compose a scanner over the simulated driver described by ``config``."""
    from devscan.core.device_scanner import DeviceScanner
    from devscan.drivers.simulated import (
        SimulatedBus,
        SimulatedCapabilityProvider,
        SimulatedDevice,
    )

    bus = SimulatedBus(
        (SimulatedDevice.from_config(d) for d in config.simulation.devices),
        virtual_url_scheme=config.virtual_devices.url_scheme,
    )
    return DeviceScanner.from_config(
        config,
        bus.create_handle,
        SimulatedCapabilityProvider(),
        listing_sink=console.print,
    )


def device_table(records, id_to_string) -> Table:
    """Rich table of a snapshot."""
    from devscan.core.validation import serial_number_to_string

    table = Table(title="Devices")
    table.add_column("Index")
    table.add_column("Name")
    table.add_column("Model")
    table.add_column("Serial")
    table.add_column("Virtual")

    for record in records:
        table.add_row(
            str(record.index),
            record.display_name,
            id_to_string(record.device_id),
            serial_number_to_string(record.serial_number) or "-",
            f"{record.virtual_name} ({record.virtual_id})" if record.is_virtual else ""
        )
    return table


def cmd_list(scanner, args, console: Console, config) -> int:
    scanner.rescan()
    records = scanner.get_device_info_list()
    console.print(device_table(records, scanner.capabilities.device_id_to_string))
    console.print(f"\n[green]Total devices: {len(records)}[/green]")
    return 0


def cmd_open(scanner, args, console: Console, config) -> int:
    handle = scanner.get_first_device_from_argument(args.argument)
    if handle is None:
        console.print(f"[red]No device for '{args.argument}'[/red]")
        return 1
    try:
        console.print(f"[green]Opened:[/green] {scanner.get_device_ref_name(handle)}")
    finally:
        handle.close()
    return 0


def cmd_info(scanner, args, console: Console, config) -> int:
    from devscan.core.formatting import format_device_record
    from devscan.core.models import find_record

    scanner.rescan()
    record = find_record(scanner.get_device_info_list(), args.index)
    if record is None:
        console.print(f"[red]No device with index {args.index}[/red]")
        return 1
    console.print(format_device_record(record, verbose=args.verbose), markup=False)
    return 0


def cmd_watch(scanner, args, console: Console, config) -> int:
    def report(diff):
        for record in diff.removed:
            console.print(f"[red]- {record.display_name}[/red]")
        for record in diff.added:
            console.print(f"[green]+ {record.display_name}[/green]")

    interval = args.interval or config.scanner.monitor_interval_sec
    with scanner.cache:
        scanner.cache.start_monitoring(interval, on_change=report)
        console.print(f"Watching {scanner.get_num_devices()} device(s), Ctrl-C to stop")
        try:
            while True:
                time.sleep(1.0)
        except KeyboardInterrupt:
            pass
    return 0


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Hardware device inventory for video I/O devices"
    )
    parser.add_argument(
        "--config", "-c",
        default="config/devscan.yaml",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides the configuration file)"
    )
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("list", help="List attached devices")

    open_parser = subparsers.add_parser("open", help="Resolve a device argument (index, serial, name, LIST)")
    open_parser.add_argument("argument")

    info_parser = subparsers.add_parser("info", help="Show the capabilities of one device")
    info_parser.add_argument("index", type=int)
    info_parser.add_argument("--verbose", "-v", action="store_true")

    watch_parser = subparsers.add_parser("watch", help="Report devices as they come and go")
    watch_parser.add_argument("--interval", type=float, default=None)

    args = parser.parse_args()

    from devscan.core.config import get_config
    config = get_config(args.config)
    setup_logging(args.log_level or config.system.log_level, config.system.log_dir)

    console = Console()
    scanner = build_scanner(config, console)

    commands = {
        "list": cmd_list,
        "open": cmd_open,
        "info": cmd_info,
        "watch": cmd_watch,
    }
    command = commands.get(args.command or "list")
    return command(scanner, args, console, config)


if __name__ == "__main__":
    sys.exit(main())
