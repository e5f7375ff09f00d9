"""Data models for vive-hid.

Config models are built from the JSON documents stored on the devices.
``from_dict`` is strict: every listed field must be present with the right
type, while unknown extra fields are ignored.
"""

import math
from dataclasses import dataclass, field
from typing import Any

# Integer fields are unsigned 32-bit on the device side
U32_MAX = 0xFFFFFFFF


def _require(data: dict[str, Any], key: str) -> Any:
    if not isinstance(data, dict):
        msg = f"Expected a JSON object, got {type(data).__name__}"
        raise TypeError(msg)
    if key not in data:
        msg = f"Missing field: {key}"
        raise KeyError(msg)
    return data[key]


def _int_field(data: dict[str, Any], key: str) -> int:
    value = _require(data, key)
    # bool is an int subclass; JSON true/false is not a number here
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"Field {key} must be an integer, got {value!r}"
        raise ValueError(msg)
    if not 0 <= value <= U32_MAX:
        msg = f"Field {key} must be in 0..{U32_MAX}, got {value}"
        raise ValueError(msg)
    return value


def _float_field(data: dict[str, Any], key: str) -> float:
    value = _require(data, key)
    if isinstance(value, bool) or not isinstance(value, int | float):
        msg = f"Field {key} must be a number, got {value!r}"
        raise ValueError(msg)
    try:
        number = float(value)
    except OverflowError as e:
        msg = f"Field {key} is out of range for a double"
        raise ValueError(msg) from e
    if not math.isfinite(number):
        msg = f"Field {key} must be finite, got {value!r}"
        raise ValueError(msg)
    return number


def _str_field(data: dict[str, Any], key: str) -> str:
    value = _require(data, key)
    if not isinstance(value, str):
        msg = f"Field {key} must be a string, got {value!r}"
        raise ValueError(msg)
    return value


@dataclass(frozen=True, slots=True)
class ConfigDevice:
    """Per-eye render target size."""

    eye_target_width_in_pixels: int
    eye_target_height_in_pixels: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ConfigDevice":
        """Build from the ``device`` object of a config document.

        Raises:
            KeyError, TypeError, ValueError: If the object does not match.
        """
        width = _int_field(data, "eye_target_width_in_pixels")
        height = _int_field(data, "eye_target_height_in_pixels")
        if width == 0 or height == 0:
            msg = f"Eye target size must be positive, got {width}x{height}"
            raise ValueError(msg)
        return cls(eye_target_width_in_pixels=width, eye_target_height_in_pixels=height)


@dataclass(frozen=True, slots=True)
class SteamConfig:
    """Config stored on the Steam link box."""

    device: ConfigDevice
    direct_mode_edid_vid: int
    direct_mode_edid_pid: int
    seconds_from_vsync_to_photons: float
    seconds_from_photons_to_vblank: float

    # Serial number of the Vive headset paired with this link box
    mb_serial_number: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SteamConfig":
        """Build from a decoded config document.

        Raises:
            KeyError, TypeError, ValueError: If the document does not match.
        """
        return cls(
            device=ConfigDevice.from_dict(_require(data, "device")),
            direct_mode_edid_vid=_int_field(data, "direct_mode_edid_vid"),
            direct_mode_edid_pid=_int_field(data, "direct_mode_edid_pid"),
            seconds_from_vsync_to_photons=_float_field(
                data, "seconds_from_vsync_to_photons"
            ),
            seconds_from_photons_to_vblank=_float_field(
                data, "seconds_from_photons_to_vblank"
            ),
            mb_serial_number=_str_field(data, "mb_serial_number"),
        )


@dataclass(frozen=True, slots=True)
class ViveConfig:
    """Config stored on the Vive headset."""

    device: ConfigDevice
    direct_mode_edid_vid: int
    direct_mode_edid_pid: int
    seconds_from_vsync_to_photons: float
    seconds_from_photons_to_vblank: float

    # Opaque; handed as-is to whatever applies lens distortion. Usually a
    # dict, so it is left out of the hash
    inhouse_lens_correction: Any = field(hash=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ViveConfig":
        """Build from a decoded config document.

        Raises:
            KeyError, TypeError, ValueError: If the document does not match.
        """
        return cls(
            device=ConfigDevice.from_dict(_require(data, "device")),
            direct_mode_edid_vid=_int_field(data, "direct_mode_edid_vid"),
            direct_mode_edid_pid=_int_field(data, "direct_mode_edid_pid"),
            seconds_from_vsync_to_photons=_float_field(
                data, "seconds_from_vsync_to_photons"
            ),
            seconds_from_photons_to_vblank=_float_field(
                data, "seconds_from_photons_to_vblank"
            ),
            inhouse_lens_correction=_require(data, "inhouse_lens_correction"),
        )
