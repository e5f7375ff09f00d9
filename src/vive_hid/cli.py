"""Command-line interface for Vive HID tools."""

import argparse
import dataclasses
import json
import logging
import sys
from typing import Any

from vive_hid import __version__
from vive_hid.device import open_steam_device, open_vive_device
from vive_hid.exceptions import (
    DeviceNotFoundError,
    ViveHidError,
    WrongDeviceError,
)
from vive_hid.resolution import Resolution

# Epilog text for main parser
MAIN_EPILOG = """\
examples:
  vive-hid steam-config            Print the link box config as JSON
  vive-hid vive-config             Print the headset config as JSON
  vive-hid devsn                   Print the headset serial number
  vive-hid modes                   List supported display modes
  vive-hid resolution 5            Switch to 4896x2448 @ 120 Hz

Use -h with any command for detailed help.
"""

RESOLUTION_EPILOG = """\
examples:
  vive-hid resolution 0                 Select mode by index
  vive-hid resolution R3680x1836f90     Select mode by name

note:
  The headset disconnects and reconnects to apply the new mode.
  Run 'vive-hid modes' to list the available modes.
"""


def _print_json(value: Any) -> None:
    print(json.dumps(dataclasses.asdict(value), indent=2))


def _report_error(e: ViveHidError) -> int:
    if isinstance(e, DeviceNotFoundError):
        print(f"Error: {e}", file=sys.stderr)
        print("Check that the device is connected.", file=sys.stderr)
    elif isinstance(e, WrongDeviceError):
        print(f"Error: {e}", file=sys.stderr)
        print("Check that the serial number belongs to this device.", file=sys.stderr)
    else:
        print(f"Error: {e}", file=sys.stderr)
    return 1


def cmd_steam_config(args: argparse.Namespace) -> int:
    """Print the Steam link box config."""
    try:
        with open_steam_device(args.serial) as steam:
            _print_json(steam.read_config())
        return 0
    except ViveHidError as e:
        return _report_error(e)
    except KeyboardInterrupt:
        return 0


def cmd_vive_config(args: argparse.Namespace) -> int:
    """Print the Vive headset config."""
    try:
        with open_vive_device(args.serial) as vive:
            _print_json(vive.read_config())
        return 0
    except ViveHidError as e:
        return _report_error(e)
    except KeyboardInterrupt:
        return 0


def cmd_devsn(args: argparse.Namespace) -> int:
    """Print the headset serial number."""
    try:
        with open_vive_device(args.serial) as vive:
            print(vive.read_devsn())
        return 0
    except ViveHidError as e:
        return _report_error(e)
    except KeyboardInterrupt:
        return 0


def cmd_ipd(args: argparse.Namespace) -> int:
    """Print the headset IPD reading."""
    try:
        with open_vive_device(args.serial) as vive:
            print(vive.read_ipd())
        return 0
    except ViveHidError as e:
        return _report_error(e)
    except KeyboardInterrupt:
        return 0


def cmd_modes(args: argparse.Namespace) -> int:
    """List supported display modes."""
    for mode in Resolution:
        width, height = mode.resolution
        print(f"{mode.value}  {mode.name:<16} {width}x{height} @ {mode.frame_rate:.2f} Hz")
    return 0


def cmd_resolution(args: argparse.Namespace) -> int:
    """Switch the headset display mode."""
    try:
        resolution = Resolution.parse(args.mode)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        with open_vive_device(args.serial) as vive:
            vive.set_resolution(resolution)
        width, height = resolution.resolution
        print(f"Switching to {width}x{height} @ {resolution.frame_rate:.2f} Hz")
        return 0
    except ViveHidError as e:
        return _report_error(e)
    except KeyboardInterrupt:
        return 0


def _add_serial_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--serial",
        metavar="SN",
        default=None,
        help="serial number of the device to open (default: first found)",
    )


def main() -> int:
    """Main entry point with subcommands."""
    # Use RawDescriptionHelpFormatter to preserve epilog formatting
    parser = argparse.ArgumentParser(
        prog="vive-hid",
        description="Vive Pro 2 HID tools.",
        epilog=MAIN_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="log every report exchanged with the device",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="commands",
        metavar="<command>",
    )

    steam_parser = subparsers.add_parser(
        "steam-config",
        help="print the link box config as JSON",
        description="Read the compressed config stored on the Steam link box.",
    )
    _add_serial_argument(steam_parser)
    steam_parser.set_defaults(func=cmd_steam_config)

    vive_parser = subparsers.add_parser(
        "vive-config",
        help="print the headset config as JSON",
        description="Read the calibration config stored on the Vive headset.",
    )
    _add_serial_argument(vive_parser)
    vive_parser.set_defaults(func=cmd_vive_config)

    devsn_parser = subparsers.add_parser(
        "devsn",
        help="print the headset serial number",
    )
    _add_serial_argument(devsn_parser)
    devsn_parser.set_defaults(func=cmd_devsn)

    ipd_parser = subparsers.add_parser(
        "ipd",
        help="print the headset IPD reading",
    )
    _add_serial_argument(ipd_parser)
    ipd_parser.set_defaults(func=cmd_ipd)

    modes_parser = subparsers.add_parser(
        "modes",
        help="list supported display modes",
    )
    modes_parser.set_defaults(func=cmd_modes)

    resolution_parser = subparsers.add_parser(
        "resolution",
        help="switch the headset display mode",
        description="Switch the headset panel to another resolution and refresh rate.",
        epilog=RESOLUTION_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    resolution_parser.add_argument(
        "mode",
        metavar="MODE",
        help="mode index (0-5) or name, see 'vive-hid modes'",
    )
    _add_serial_argument(resolution_parser)
    resolution_parser.set_defaults(func=cmd_resolution)

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
