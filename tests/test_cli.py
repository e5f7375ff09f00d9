"""Tests for CLI module."""

import argparse
import json
import logging
from unittest.mock import patch

import pytest

from vive_hid.cli import (
    cmd_devsn,
    cmd_modes,
    cmd_resolution,
    cmd_steam_config,
    cmd_vive_config,
    main,
)
from vive_hid.device import SteamDevice, ViveDevice
from vive_hid.exceptions import DeviceNotFoundError, WrongDeviceError


class TestCmdResolution:
    """Tests for cmd_resolution command."""

    def test_invalid_mode(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should return 1 for an unknown mode without opening a device."""
        with patch("vive_hid.cli.open_vive_device") as open_mock:
            result = cmd_resolution(argparse.Namespace(mode="9", serial=None))
        assert result == 1
        open_mock.assert_not_called()
        assert "Unknown resolution" in capsys.readouterr().err

    def test_sets_mode(self, make_vive: type) -> None:
        """Should send the mode to the headset."""
        fake = make_vive()
        with patch("vive_hid.cli.open_vive_device") as open_mock:
            open_mock.return_value.__enter__.return_value = ViveDevice(fake)
            result = cmd_resolution(argparse.Namespace(mode="2", serial="VIVE0001"))
        assert result == 0
        open_mock.assert_called_once_with("VIVE0001")
        assert fake.feature_reports[1][4:9] == b"dtd,2"

    def test_device_not_found(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should return 1 and name the serial that was not found."""
        with patch(
            "vive_hid.cli.open_vive_device",
            side_effect=DeviceNotFoundError("No device with serial number 'X'"),
        ):
            result = cmd_resolution(argparse.Namespace(mode="0", serial="X"))
        assert result == 1
        err = capsys.readouterr().err
        assert "Error: No device with serial number 'X'" in err
        assert "connected" in err


class TestCmdConfig:
    """Tests for the config commands."""

    def test_steam_config_json(
        self,
        make_steam: type,
        steam_blob: bytes,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Should print the Steam config as JSON."""
        with patch("vive_hid.cli.open_steam_device") as open_mock:
            open_mock.return_value.__enter__.return_value = SteamDevice(
                make_steam(steam_blob)
            )
            result = cmd_steam_config(argparse.Namespace(serial=None))
        assert result == 0
        printed = json.loads(capsys.readouterr().out)
        assert printed["mb_serial_number"] == "FA9A2B000000"
        assert printed["device"]["eye_target_width_in_pixels"] == 2448

    def test_vive_config_json(
        self,
        make_vive: type,
        vive_blob: bytes,
        vive_config_dict: dict,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Should print the Vive config as JSON."""
        with patch("vive_hid.cli.open_vive_device") as open_mock:
            open_mock.return_value.__enter__.return_value = ViveDevice(
                make_vive(vive_blob)
            )
            result = cmd_vive_config(argparse.Namespace(serial=None))
        assert result == 0
        printed = json.loads(capsys.readouterr().out)
        assert (
            printed["inhouse_lens_correction"]
            == vive_config_dict["inhouse_lens_correction"]
        )

    def test_wrong_device(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should return 1 with a hint when the serial is of another family."""
        with patch(
            "vive_hid.cli.open_vive_device",
            side_effect=WrongDeviceError("Device 'S' is not a ViveDevice"),
        ):
            result = cmd_vive_config(argparse.Namespace(serial="S"))
        assert result == 1
        assert "serial number" in capsys.readouterr().err


class TestCmdDevsn:
    """Tests for cmd_devsn command."""

    def test_prints_serial(
        self, make_vive: type, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Should print the headset serial number."""
        fake = make_vive(strings={b"mfg-r-devsn": b"FA9A2B000000"})
        with patch("vive_hid.cli.open_vive_device") as open_mock:
            open_mock.return_value.__enter__.return_value = ViveDevice(fake)
            result = cmd_devsn(argparse.Namespace(serial=None))
        assert result == 0
        assert capsys.readouterr().out.strip() == "FA9A2B000000"


class TestCmdModes:
    """Tests for cmd_modes command."""

    def test_lists_all_modes(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should print one line per mode."""
        assert cmd_modes(argparse.Namespace()) == 0
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 6
        assert "4896x2448 @ 120.02 Hz" in lines[5]


class TestMain:
    """Tests for the main entry point."""

    def test_dispatches_subcommand(self) -> None:
        """main should parse argv and run the subcommand."""
        with patch("sys.argv", ["vive-hid", "modes"]):
            assert main() == 0

    def test_requires_subcommand(self) -> None:
        """Missing subcommand should exit with usage error."""
        with patch("sys.argv", ["vive-hid"]), pytest.raises(SystemExit):
            main()

    def test_verbose_enables_debug(self) -> None:
        """-v should configure DEBUG logging."""
        with (
            patch("sys.argv", ["vive-hid", "-v", "modes"]),
            patch("vive_hid.cli.logging.basicConfig") as basic_config,
        ):
            main()
        assert basic_config.call_args.kwargs["level"] == logging.DEBUG

    def test_keyboard_interrupt(self) -> None:
        """Ctrl+C should exit cleanly."""
        with patch(
            "vive_hid.cli.open_vive_device", side_effect=KeyboardInterrupt
        ):
            assert cmd_devsn(argparse.Namespace(serial=None)) == 0
