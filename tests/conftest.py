"""Pytest configuration and fixtures."""

import json
import zlib
from collections import deque
from collections.abc import Iterator
from unittest.mock import MagicMock

import pytest

from vive_hid import device as device_module
from vive_hid.constants import REPORT_SIZE


def reply(report_id: int, prefix: bytes, payload: bytes) -> list[int]:
    """Build a reply report as hidapi returns it (list of ints)."""
    report = bytes([report_id]) + prefix + bytes([len(payload)]) + payload
    return list(report.ljust(REPORT_SIZE, b"\x00"))


class FakeViveDevice:
    """Scripted stand-in for an opened Vive headset hid.device.

    Answers config length and chunk queries from ``blob``, and the
    manufacturing commands from ``strings``.
    """

    def __init__(
        self,
        blob: bytes = b"",
        chunk_size: int = 60,
        declared_len: int | None = None,
        strings: dict[bytes, bytes] | None = None,
    ) -> None:
        self.blob = blob
        self.chunk_size = chunk_size
        self.declared_len = len(blob) if declared_len is None else declared_len
        self.strings = strings or {}
        self.writes: list[bytes] = []
        self.feature_reports: list[bytes] = []
        self.offsets: list[int] = []
        self.closed = False
        self._replies: deque[list[int]] = deque()

    def write(self, report: bytes) -> int:
        report = bytes(report)
        self.writes.append(report)
        if report[0] == 0x01 and report[1:3] == b"\xea\xb1":
            length = self.declared_len.to_bytes(4, "little")
            self._replies.append(reply(0x01, b"\xea\xb1", length))
        elif report[0] == 0x01 and report[1:3] == b"\xeb\xb1":
            offset = int.from_bytes(report[4:8], "little")
            self.offsets.append(offset)
            chunk = self.blob[offset : offset + self.chunk_size]
            self._replies.append(reply(0x01, b"\xeb\xb1", chunk))
        elif report[0] == 0x02:
            command = report[1:].rstrip(b"\x00")
            self._replies.append(reply(0x02, b"", self.strings.get(command, b"")))
        return len(report)

    def read(self, max_length: int, timeout_ms: int = 0) -> list[int]:
        return self._replies.popleft()[:max_length]

    def send_feature_report(self, report: bytes) -> int:
        self.feature_reports.append(bytes(report))
        return len(report)

    def close(self) -> None:
        self.closed = True


class FakeSteamDevice:
    """Scripted stand-in for an opened Steam link box hid.device.

    Streams ``blob`` through feature report 17 in chunks of ``chunk_sizes``
    (cycled), then a zero-length terminator. ``failures`` lists how many
    times each successive feature read fails before succeeding.
    """

    def __init__(
        self,
        blob: bytes = b"",
        chunk_sizes: tuple[int, ...] = (62,),
        failures: list[int] | None = None,
    ) -> None:
        self.blob = blob
        self.chunk_sizes = chunk_sizes
        self.failures = deque(failures or [])
        self.requests: list[int] = []
        self.closed = False
        self._offset = 0
        self._chunk_index = 0
        self._pending_failures: int | None = None

    def get_feature_report(self, report_id: int, max_length: int) -> list[int]:
        self.requests.append(report_id)
        if self._pending_failures is None:
            self._pending_failures = self.failures.popleft() if self.failures else 0
        if self._pending_failures > 0:
            self._pending_failures -= 1
            msg = "read error"
            raise OSError(msg)
        self._pending_failures = None

        if report_id == 16:
            return [16] + [0] * (max_length - 1)
        size = self.chunk_sizes[self._chunk_index % len(self.chunk_sizes)]
        self._chunk_index += 1
        chunk = self.blob[self._offset : self._offset + size]
        self._offset += len(chunk)
        report = bytes([17, len(chunk)]) + chunk
        return list(report.ljust(max_length, b"\x00"))

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def reset_hidapi(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Give every test a fresh enumeration context."""
    monkeypatch.setattr(device_module, "_hidapi", None)
    yield


@pytest.fixture
def steam_config_dict() -> dict:
    """Config document as stored on the Steam link box."""
    return {
        "device": {
            "eye_target_height_in_pixels": 2448,
            "eye_target_width_in_pixels": 2448,
        },
        "direct_mode_edid_pid": 43521,
        "direct_mode_edid_vid": 53838,
        "seconds_from_photons_to_vblank": 0.0,
        "seconds_from_vsync_to_photons": 0.011,
        "mb_serial_number": "FA9A2B000000",
        "lighthouse_config": {"modelPoints": []},
    }


@pytest.fixture
def vive_config_dict() -> dict:
    """Config document as stored on the Vive headset."""
    return {
        "device": {
            "eye_target_height_in_pixels": 2448,
            "eye_target_width_in_pixels": 2448,
        },
        "direct_mode_edid_pid": 43521,
        "direct_mode_edid_vid": 53838,
        "seconds_from_photons_to_vblank": 0.0,
        "seconds_from_vsync_to_photons": 0.011,
        "inhouse_lens_correction": {
            "left": {"coefficients": [1.0, 0.25, -0.5]},
            "right": {"coefficients": [1.0, 0.25, -0.5]},
        },
    }


@pytest.fixture
def steam_blob(steam_config_dict: dict) -> bytes:
    """Compressed Steam config blob."""
    return zlib.compress(json.dumps(steam_config_dict).encode("utf-8"))


@pytest.fixture
def vive_blob(vive_config_dict: dict) -> bytes:
    """Vive config blob: opaque 128-byte header followed by JSON."""
    header = bytes(range(128))
    return header + json.dumps(vive_config_dict).encode("utf-8")


@pytest.fixture
def mock_hid_device() -> MagicMock:
    """Create a mock hid.device object."""
    device = MagicMock()
    device.open = MagicMock()
    device.close = MagicMock()
    device.write = MagicMock(return_value=REPORT_SIZE)
    device.send_feature_report = MagicMock(return_value=REPORT_SIZE)
    return device


@pytest.fixture
def device_list() -> list[dict]:
    """Enumeration result (hidapi format) with one link box and one headset."""
    return [
        {
            "vendor_id": 0x28DE,
            "product_id": 0x2300,
            "serial_number": "STEAM0001",
            "path": b"/dev/hidraw0",
            "product_string": "Valve VR Radio & HMD Mic",
        },
        {
            "vendor_id": 0x0BB4,
            "product_id": 0x0342,
            "serial_number": "VIVE0001",
            "path": b"/dev/hidraw1",
            "product_string": "HTC Vive Pro 2",
        },
    ]


@pytest.fixture
def make_vive() -> type[FakeViveDevice]:
    """Factory for scripted Vive headset devices."""
    return FakeViveDevice


@pytest.fixture
def make_steam() -> type[FakeSteamDevice]:
    """Factory for scripted Steam link box devices."""
    return FakeSteamDevice
