"""Custom exceptions for Vive HID."""


class ViveHidError(Exception):
    """Base exception for Vive HID errors."""


class DeviceCommunicationError(ViveHidError):
    """Raised when the HID transport fails (open, read or write)."""


class DeviceNotFoundError(ViveHidError):
    """Raised when no connected device matches the request."""

    def __init__(self, message: str = "Device not found") -> None:
        super().__init__(message)


class WrongDeviceError(ViveHidError):
    """Raised when a serial number matches a device of another family.

    The serial lookup found a device, but its vendor/product id pair does
    not belong to the family that was asked to open it.
    """

    def __init__(self, message: str = "Device is not of the expected family") -> None:
        super().__init__(message)


class ConfigSizeMismatchError(ViveHidError):
    """Raised when the reassembled config length differs from the declared one."""

    def __init__(self, declared: int, received: int) -> None:
        self.declared = declared
        self.received = received
        super().__init__(
            f"Config size mismatch: declared {declared} bytes, received {received}"
        )


class ConfigReadFailedError(ViveHidError):
    """Raised when the config cannot be read or decoded.

    Covers an exhausted retry budget as well as decompression and JSON
    decoding failures.
    """

    def __init__(self, message: str = "Failed to read config") -> None:
        super().__init__(message)


class ProtocolError(ViveHidError):
    """Raised when a device reply violates the wire protocol.

    Attributes:
        reason: Short static description of the mismatch.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Protocol error: {reason}")
