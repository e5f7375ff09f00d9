"""Fixed-size HID report framing.

Every report exchanged with the Steam link box and the Vive headset is
64 bytes long, with the report id in byte 0.

Report layouts:
- Output:  id | payload (<= 63 bytes)
- Feature: id | sub id (LE16) | length | payload (<= 60 bytes)
- Reply:   id | prefix | length | payload (<= 62 - len(prefix) bytes)

Unused trailing bytes are zero on the way out and undefined on the way in.
"""

import logging
from typing import Any

from vive_hid.constants import (
    FEATURE_PAYLOAD_MAX,
    OUTPUT_PAYLOAD_MAX,
    REPORT_SIZE,
)
from vive_hid.exceptions import DeviceCommunicationError, ProtocolError

logger = logging.getLogger(__name__)


def build_report(report_id: int, data: bytes) -> bytes:
    """Build a 64-byte output report.

    Args:
        report_id: Report id placed in byte 0.
        data: Payload placed from byte 1, at most 63 bytes.

    Returns:
        The zero-padded report.

    Raises:
        ValueError: If the payload does not fit.
    """
    if len(data) > OUTPUT_PAYLOAD_MAX:
        msg = (
            f"Output payload must be at most {OUTPUT_PAYLOAD_MAX} bytes, "
            f"got {len(data)}"
        )
        raise ValueError(msg)
    report = bytearray(REPORT_SIZE)
    report[0] = report_id
    report[1 : 1 + len(data)] = data
    return bytes(report)


def build_feature_report(report_id: int, sub_id: int, data: bytes) -> bytes:
    """Build a 64-byte feature report carrying a sub-command.

    Args:
        report_id: Report id placed in byte 0.
        sub_id: 16-bit sub-command id, stored little-endian in bytes 1-2.
        data: Payload placed from byte 4, at most 60 bytes.

    Returns:
        The zero-padded report.

    Raises:
        ValueError: If the payload does not fit or sub_id is not 16-bit.
    """
    if len(data) > FEATURE_PAYLOAD_MAX:
        msg = (
            f"Feature payload must be at most {FEATURE_PAYLOAD_MAX} bytes, "
            f"got {len(data)}"
        )
        raise ValueError(msg)
    report = bytearray(REPORT_SIZE)
    report[0] = report_id
    report[1:3] = sub_id.to_bytes(2, "little")
    report[3] = len(data)
    report[4 : 4 + len(data)] = data
    return bytes(report)


def parse_reply(report: bytes, report_id: int, strip_prefix: bytes = b"") -> bytes:
    """Validate a reply report and extract its payload.

    Args:
        report: Raw report as read from the device.
        report_id: Expected report id.
        strip_prefix: Bytes expected right after the report id.

    Returns:
        The payload bytes bounded by the reply's length byte.

    Raises:
        ProtocolError: On a wrong report id, prefix or length byte.
    """
    # Short reads leave the tail undefined; treat it as zero
    report = bytes(report[:REPORT_SIZE]).ljust(REPORT_SIZE, b"\x00")
    if report[0] != report_id:
        raise ProtocolError("wrong report id")
    prefix_end = 1 + len(strip_prefix)
    if report[1:prefix_end] != strip_prefix:
        raise ProtocolError("wrong prefix")
    size = report[prefix_end]
    if size > REPORT_SIZE - 1 - prefix_end:
        raise ProtocolError("wrong size")
    return report[prefix_end + 1 : prefix_end + 1 + size]


class ReportCodec:
    """Report-level access to one open HID device.

    Translates hidapi failures (OSError, negative return codes) into
    DeviceCommunicationError. Nothing here retries.
    """

    def __init__(self, device: Any) -> None:
        """Wrap an opened hid.device.

        Args:
            device: An opened ``hid.device`` instance.
        """
        self._device = device

    @property
    def device(self) -> Any:
        """The underlying hid.device, or None once closed."""
        return self._device

    def close(self) -> None:
        """Close the underlying device. Safe to call twice."""
        if self._device is not None:
            try:
                self._device.close()
            finally:
                self._device = None

    def write(self, report_id: int, data: bytes) -> None:
        """Send an output report.

        Raises:
            DeviceCommunicationError: If the write fails.
        """
        report = build_report(report_id, data)
        logger.debug("write id=0x%02x data=%s", report_id, data.hex())
        try:
            result = self._require_device().write(report)
        except OSError as e:
            msg = f"Failed to write report: {e}"
            raise DeviceCommunicationError(msg) from e
        if result < 0:
            msg = f"Report write rejected by device (result={result})"
            raise DeviceCommunicationError(msg)

    def write_feature(self, report_id: int, sub_id: int, data: bytes) -> None:
        """Send a feature report carrying a sub-command.

        Raises:
            DeviceCommunicationError: If sending fails or report is rejected.
        """
        report = build_feature_report(report_id, sub_id, data)
        logger.debug(
            "write_feature id=0x%02x sub_id=0x%04x data=%r", report_id, sub_id, data
        )
        try:
            result = self._require_device().send_feature_report(report)
        except OSError as e:
            msg = f"Failed to send feature report: {e}"
            raise DeviceCommunicationError(msg) from e
        if result < 0:
            msg = f"Feature report rejected by device (result={result})"
            raise DeviceCommunicationError(msg)

    def read(self, report_id: int, strip_prefix: bytes = b"") -> bytes:
        """Read one reply report and return its payload.

        Args:
            report_id: Expected report id.
            strip_prefix: Bytes expected right after the report id.

        Returns:
            Payload bytes (at most 62 - len(strip_prefix)).

        Raises:
            DeviceCommunicationError: If the read fails.
            ProtocolError: If the reply does not match.
        """
        try:
            raw = self._require_device().read(REPORT_SIZE)
        except OSError as e:
            msg = f"Failed to read report: {e}"
            raise DeviceCommunicationError(msg) from e
        if not raw:
            msg = "No report received from device"
            raise DeviceCommunicationError(msg)
        payload = parse_reply(bytes(raw), report_id, strip_prefix)
        logger.debug("read id=0x%02x size=%d", report_id, len(payload))
        return payload

    def get_feature(self, report_id: int) -> bytes:
        """Fetch one feature report.

        Returns:
            The report, byte 0 being the report id.

        Raises:
            DeviceCommunicationError: If the read fails.
        """
        try:
            raw = self._require_device().get_feature_report(report_id, REPORT_SIZE)
        except OSError as e:
            msg = f"Failed to get feature report: {e}"
            raise DeviceCommunicationError(msg) from e
        if not raw:
            msg = f"Empty feature report 0x{report_id:02x}"
            raise DeviceCommunicationError(msg)
        return bytes(raw).ljust(REPORT_SIZE, b"\x00")

    def _require_device(self) -> Any:
        if self._device is None:
            msg = "Device not opened"
            raise DeviceCommunicationError(msg)
        return self._device
