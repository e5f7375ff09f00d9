"""Display modes supported by the Vive Pro 2 panel."""

from enum import Enum
from typing import Final, NamedTuple

from vive_hid.constants import VIVE_CMD_WIRELESS_OFF


class DisplayMode(NamedTuple):
    """Panel size (both eyes) and refresh rate of a display mode."""

    width: int
    height: int
    frame_rate: float


class Resolution(Enum):
    """Display mode, valued by the index the headset firmware expects."""

    R2448x1224f90 = 0
    R2448x1224f120 = 1
    R3264x1632f90 = 2
    R3680x1836f90 = 3
    R4896x2448f90 = 4
    R4896x2448f120 = 5

    @classmethod
    def from_index(cls, value: int) -> "Resolution":
        """Look up a mode by its firmware index.

        Raises:
            ValueError: If value is not an index in [0, 5].
        """
        if isinstance(value, bool) or not isinstance(value, int):
            msg = f"Resolution index must be an integer, got {value!r}"
            raise ValueError(msg)
        for mode in cls:
            if mode.value == value:
                return mode
        msg = f"Unknown resolution index: {value} (expected 0-{len(cls) - 1})"
        raise ValueError(msg)

    @classmethod
    def parse(cls, text: str) -> "Resolution":
        """Parse a mode from its index ("3") or its name ("R3680x1836f90").

        Raises:
            ValueError: If text names no mode.
        """
        text = text.strip()
        if text.isdigit():
            return cls.from_index(int(text))
        for mode in cls:
            if mode.name.lower() == text.lower():
                return mode
        msg = f"Unknown resolution: {text}"
        raise ValueError(msg)

    @property
    def mode(self) -> DisplayMode:
        """Fixed (width, height, frame_rate) of this mode."""
        return _DISPLAY_MODES[self]

    @property
    def resolution(self) -> tuple[int, int]:
        """Panel size in pixels as (width, height)."""
        return self.mode.width, self.mode.height

    @property
    def frame_rate(self) -> float:
        """Refresh rate in Hz."""
        return self.mode.frame_rate


_DISPLAY_MODES: Final[dict[Resolution, DisplayMode]] = {
    Resolution.R2448x1224f90: DisplayMode(2448, 1224, 90.03),
    Resolution.R2448x1224f120: DisplayMode(2448, 1224, 120.05),
    Resolution.R3264x1632f90: DisplayMode(3264, 1632, 90.00),
    Resolution.R3680x1836f90: DisplayMode(3680, 1836, 90.02),
    Resolution.R4896x2448f90: DisplayMode(4896, 2448, 90.02),
    Resolution.R4896x2448f120: DisplayMode(4896, 2448, 120.02),
}


def resolution_commands(resolution: Resolution) -> tuple[bytes, bytes]:
    """Build the display commands selecting a mode.

    Wireless display mode is switched off first, then the mode is selected
    by its index ("dtd,<index>").

    Returns:
        The two ASCII payloads, in send order.
    """
    return VIVE_CMD_WIRELESS_OFF, f"dtd,{resolution.value}".encode("ascii")
