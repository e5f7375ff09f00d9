"""Config blob decoding."""

import json
import logging
import zlib
from typing import Any, NoReturn

from vive_hid.constants import VIVE_CONFIG_HEADER_SIZE
from vive_hid.exceptions import ConfigReadFailedError, ProtocolError
from vive_hid.models import SteamConfig, ViveConfig

logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> NoReturn:
    msg = f"Invalid JSON number: {name}"
    raise ValueError(msg)


def _load_json(text: str) -> Any:
    # json.loads accepts NaN and Infinity, which are not JSON
    return json.loads(text, parse_constant=_reject_constant)


def decode_steam_config(blob: bytes) -> SteamConfig:
    """Decode the zlib-compressed JSON config of the Steam link box.

    Raises:
        ConfigReadFailedError: If decompression, UTF-8 or JSON decoding fails,
            or the document does not match the SteamConfig schema.
    """
    try:
        text = zlib.decompress(blob).decode("utf-8")
    except (zlib.error, UnicodeDecodeError) as e:
        msg = f"Failed to decompress Steam config: {e}"
        raise ConfigReadFailedError(msg) from e

    logger.debug("Steam config decompressed to %d characters", len(text))
    try:
        return SteamConfig.from_dict(_load_json(text))
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        msg = f"Failed to parse Steam config: {e}"
        raise ConfigReadFailedError(msg) from e


def decode_vive_config(blob: bytes) -> ViveConfig:
    """Decode the config blob of the Vive headset.

    The first 128 bytes are an undeciphered header followed by a hash and
    are skipped without inspection. The rest is UTF-8 JSON.

    Raises:
        ProtocolError: If the blob is shorter than the header or the
            remainder is not UTF-8.
        ConfigReadFailedError: If the JSON does not match the ViveConfig schema.
    """
    if len(blob) < VIVE_CONFIG_HEADER_SIZE:
        raise ProtocolError("config header truncated")

    try:
        text = blob[VIVE_CONFIG_HEADER_SIZE:].decode("utf-8")
    except UnicodeDecodeError as e:
        raise ProtocolError("config is not utf-8") from e

    try:
        return ViveConfig.from_dict(_load_json(text))
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        msg = f"Failed to parse Vive config: {e}"
        raise ConfigReadFailedError(msg) from e
