"""Device handles for the Steam link box and the Vive headset."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, ClassVar, Self

import hid

from vive_hid.constants import (
    STEAM_PID,
    STEAM_VID,
    VIVE_CMD_DEVSN,
    VIVE_CMD_IPD,
    VIVE_PID,
    VIVE_REPORT_FEATURE,
    VIVE_REPORT_MFG,
    VIVE_SUB_ID_DISPLAY,
    VIVE_VID,
)
from vive_hid.decoder import decode_steam_config, decode_vive_config
from vive_hid.exceptions import (
    DeviceCommunicationError,
    DeviceNotFoundError,
    ProtocolError,
    WrongDeviceError,
)
from vive_hid.report import ReportCodec
from vive_hid.resolution import Resolution, resolution_commands
from vive_hid.transfer import read_steam_config_blob, read_vive_config_blob

if TYPE_CHECKING:
    from collections.abc import Generator

    from vive_hid.models import SteamConfig, ViveConfig

logger = logging.getLogger(__name__)


class HidApi:
    """Process-wide HID enumeration context.

    Takes a snapshot of the connected HID devices when created and opens
    devices through hidapi. Read-only once built; obtain it with get_hidapi().
    """

    def __init__(self) -> None:
        try:
            self._devices: tuple[dict[str, Any], ...] = tuple(hid.enumerate())
        except OSError as e:
            msg = f"Failed to enumerate HID devices: {e}"
            raise DeviceCommunicationError(msg) from e
        logger.debug("Enumerated %d HID devices", len(self._devices))

    @property
    def device_list(self) -> tuple[dict[str, Any], ...]:
        """Device info dictionaries (hidapi format) seen at creation."""
        return self._devices

    def find_serial(self, serial: str) -> dict[str, Any]:
        """Return the first enumerated device with the given serial number.

        Raises:
            DeviceNotFoundError: If no device has that serial number.
        """
        for dev_info in self._devices:
            if dev_info.get("serial_number") == serial:
                return dev_info
        msg = f"No device with serial number {serial!r}"
        raise DeviceNotFoundError(msg)

    def open(self, vendor_id: int, product_id: int, serial: str | None = None) -> Any:
        """Open a device by vendor/product id and optional serial number.

        Returns:
            The opened hid.device.

        Raises:
            DeviceCommunicationError: If hidapi cannot open the device.
        """
        device = hid.device()
        try:
            device.open(vendor_id, product_id, serial)
        except OSError as e:
            msg = f"Failed to open device {vendor_id:04x}:{product_id:04x}: {e}"
            raise DeviceCommunicationError(msg) from e
        logger.debug(
            "Opened %04x:%04x serial=%s", vendor_id, product_id, serial or "<first>"
        )
        return device


_hidapi: HidApi | None = None
_hidapi_lock = threading.Lock()


def get_hidapi() -> HidApi:
    """Return the shared HidApi, creating it on first use.

    Creation happens at most once per process, even when several threads
    ask for it at the same time.
    """
    global _hidapi  # noqa: PLW0603
    if _hidapi is None:
        with _hidapi_lock:
            if _hidapi is None:
                _hidapi = HidApi()
    return _hidapi


class _HidDevice:
    """Shared lifecycle of an opened device of one family."""

    VENDOR_ID: ClassVar[int]
    PRODUCT_ID: ClassVar[int]

    def __init__(self, device: Any) -> None:
        self._codec = ReportCodec(device)

    @classmethod
    def open_first(cls) -> Self:
        """Open the first connected device of this family.

        Raises:
            DeviceCommunicationError: If no such device can be opened.
        """
        api = get_hidapi()
        return cls(api.open(cls.VENDOR_ID, cls.PRODUCT_ID))

    @classmethod
    def open(cls, serial: str) -> Self:
        """Open the device with the given serial number.

        Raises:
            DeviceNotFoundError: If no device has that serial number.
            WrongDeviceError: If the device belongs to another family.
            DeviceCommunicationError: If the device cannot be opened.
        """
        api = get_hidapi()
        dev_info = api.find_serial(serial)
        if (
            dev_info["vendor_id"] != cls.VENDOR_ID
            or dev_info["product_id"] != cls.PRODUCT_ID
        ):
            msg = (
                f"Device {serial!r} ({dev_info['vendor_id']:04x}:"
                f"{dev_info['product_id']:04x}) is not a {cls.__name__}"
            )
            raise WrongDeviceError(msg)
        return cls(api.open(dev_info["vendor_id"], dev_info["product_id"], serial))

    @property
    def is_open(self) -> bool:
        """Whether the device is still open."""
        return self._codec.device is not None

    def close(self) -> None:
        """Close the device."""
        self._codec.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self.close()


class SteamDevice(_HidDevice):
    """The Steam link box sitting between the headset and the PC.

    Example:
        with SteamDevice.open_first() as steam:
            config = steam.read_config()
            print(config.mb_serial_number)
    """

    VENDOR_ID = STEAM_VID
    PRODUCT_ID = STEAM_PID

    def read_config(self) -> SteamConfig:
        """Read and decode the link box config.

        Raises:
            ConfigReadFailedError: If reading keeps failing or decoding fails.
            ProtocolError: If the device sends a malformed chunk.
        """
        return decode_steam_config(read_steam_config_blob(self._codec))


class ViveDevice(_HidDevice):
    """The Vive Pro 2 headset.

    Example:
        with ViveDevice.open_first() as vive:
            vive.set_resolution(Resolution.R4896x2448f120)
    """

    VENDOR_ID = VIVE_VID
    PRODUCT_ID = VIVE_PID

    def read_devsn(self) -> str:
        """Read the headset serial number.

        Raises:
            DeviceCommunicationError: If the exchange fails.
            ProtocolError: If the reply is malformed or not UTF-8.
        """
        return self._read_string(VIVE_CMD_DEVSN, "devsn is not a string")

    def read_ipd(self) -> str:
        """Read the raw IPD (lens distance) ADC value as reported.

        Raises:
            DeviceCommunicationError: If the exchange fails.
            ProtocolError: If the reply is malformed or not UTF-8.
        """
        return self._read_string(VIVE_CMD_IPD, "ipd is not a string")

    def read_config(self) -> ViveConfig:
        """Read and decode the headset config.

        Raises:
            ConfigSizeMismatchError: If the received size differs from the declared one.
            ConfigReadFailedError: If the JSON does not decode.
            DeviceCommunicationError: If the exchange fails.
            ProtocolError: If a reply is malformed.
        """
        return decode_vive_config(read_vive_config_blob(self._codec))

    def set_resolution(self, resolution: Resolution) -> None:
        """Switch the panel to another display mode.

        The headset disconnects and reconnects to apply the mode; this
        returns as soon as the commands are sent.

        Raises:
            DeviceCommunicationError: If sending fails.
        """
        for command in resolution_commands(resolution):
            self._codec.write_feature(VIVE_REPORT_FEATURE, VIVE_SUB_ID_DISPLAY, command)
        width, height = resolution.resolution
        logger.info(
            "Requested %dx%d @ %.2f Hz, headset will reconnect",
            width,
            height,
            resolution.frame_rate,
        )

    def _read_string(self, command: bytes, reason: str) -> str:
        self._codec.write(VIVE_REPORT_MFG, command)
        payload = self._codec.read(VIVE_REPORT_MFG)
        try:
            return payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ProtocolError(reason) from e


@contextmanager
def open_steam_device(serial: str | None = None) -> Generator[SteamDevice]:
    """Context manager opening the Steam link box.

    Args:
        serial: Serial number to open; the first link box when None.

    Yields:
        An opened SteamDevice, closed on exit.
    """
    device = SteamDevice.open_first() if serial is None else SteamDevice.open(serial)
    with device:
        yield device


@contextmanager
def open_vive_device(serial: str | None = None) -> Generator[ViveDevice]:
    """Context manager opening the Vive headset.

    Args:
        serial: Serial number to open; the first headset when None.

    Yields:
        An opened ViveDevice, closed on exit.
    """
    device = ViveDevice.open_first() if serial is None else ViveDevice.open(serial)
    with device:
        yield device
