"""Constants for Vive Pro 2 HID communication."""

from typing import Final

# Steam link box (the adapter between the headset and the PC)
STEAM_VID: Final[int] = 0x28DE
STEAM_PID: Final[int] = 0x2300

# Vive headset
VIVE_VID: Final[int] = 0x0BB4
VIVE_PID: Final[int] = 0x0342

# Every report exchanged with either device is exactly this long
REPORT_SIZE: Final[int] = 64

# Payload room left after the header bytes
OUTPUT_PAYLOAD_MAX: Final[int] = REPORT_SIZE - 1  # report id
FEATURE_PAYLOAD_MAX: Final[int] = REPORT_SIZE - 4  # report id + sub id + length
REPLY_PAYLOAD_MAX: Final[int] = REPORT_SIZE - 2  # report id + length

# Steam config feature reports
STEAM_REPORT_CONFIG_INIT: Final[int] = 16
STEAM_REPORT_CONFIG_CHUNK: Final[int] = 17

# Consecutive transport failures tolerated on the Steam config path
MAX_READ_RETRIES: Final[int] = 5

# Vive config query (output report 0x01)
VIVE_REPORT_CONFIG: Final[int] = 0x01
VIVE_CONFIG_LENGTH_PREFIX: Final[bytes] = bytes([0xEA, 0xB1])
VIVE_CONFIG_CHUNK_PREFIX: Final[bytes] = bytes([0xEB, 0xB1])
VIVE_CONFIG_CHUNK_OFFSET_SIZE: Final[int] = 0x04

# Undeciphered header + sha256 hash in front of the Vive config JSON
VIVE_CONFIG_HEADER_SIZE: Final[int] = 128

# Manufacturing commands (output report 0x02)
VIVE_REPORT_MFG: Final[int] = 0x02
VIVE_CMD_DEVSN: Final[bytes] = b"mfg-r-devsn"
VIVE_CMD_IPD: Final[bytes] = b"mfg-r-ipdadc"

# Display mode command (feature report 0x04, sub id 0x2970)
VIVE_REPORT_FEATURE: Final[int] = 0x04
VIVE_SUB_ID_DISPLAY: Final[int] = 0x2970
VIVE_CMD_WIRELESS_OFF: Final[bytes] = b"wireless,0"
