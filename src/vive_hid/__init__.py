"""Vive HID - Read configs from and control a Vive Pro 2 over USB HID.

This package talks to the two HID devices of a Vive Pro 2 setup: the
Steam link box and the headset itself. It reads their calibration
configs and switches the headset display mode.

Example:
    from vive_hid import Resolution, open_vive_device

    with open_vive_device() as vive:
        config = vive.read_config()
        vive.set_resolution(Resolution.R4896x2448f90)
"""

from vive_hid.constants import (
    REPORT_SIZE,
    STEAM_PID,
    STEAM_VID,
    VIVE_PID,
    VIVE_VID,
)
from vive_hid.device import (
    HidApi,
    SteamDevice,
    ViveDevice,
    get_hidapi,
    open_steam_device,
    open_vive_device,
)
from vive_hid.exceptions import (
    ConfigReadFailedError,
    ConfigSizeMismatchError,
    DeviceCommunicationError,
    DeviceNotFoundError,
    ProtocolError,
    ViveHidError,
    WrongDeviceError,
)
from vive_hid.models import ConfigDevice, SteamConfig, ViveConfig
from vive_hid.resolution import DisplayMode, Resolution

__version__ = "0.1.0"

__all__ = [
    "REPORT_SIZE",
    "STEAM_PID",
    "STEAM_VID",
    "VIVE_PID",
    "VIVE_VID",
    "ConfigDevice",
    "ConfigReadFailedError",
    "ConfigSizeMismatchError",
    "DeviceCommunicationError",
    "DeviceNotFoundError",
    "DisplayMode",
    "HidApi",
    "ProtocolError",
    "Resolution",
    "SteamConfig",
    "SteamDevice",
    "ViveConfig",
    "ViveDevice",
    "ViveHidError",
    "WrongDeviceError",
    "__version__",
    "get_hidapi",
    "open_steam_device",
    "open_vive_device",
]
