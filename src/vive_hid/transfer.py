"""Chunked config transfer for the Steam link box and the Vive headset.

Both devices keep their configuration in a blob far larger than a single
report, but page it out differently:

- Steam: a stream of feature reports, each ``[id, n, data[n]]``, ended by
  a chunk with ``n == 0``. No total length is announced up front.
- Vive: the total length is queried first, then chunks are fetched by
  absolute offset until the declared length is reached.
"""

import logging

from vive_hid.constants import (
    REPLY_PAYLOAD_MAX,
    STEAM_REPORT_CONFIG_CHUNK,
    STEAM_REPORT_CONFIG_INIT,
    VIVE_CONFIG_CHUNK_OFFSET_SIZE,
    VIVE_CONFIG_CHUNK_PREFIX,
    VIVE_CONFIG_LENGTH_PREFIX,
    VIVE_REPORT_CONFIG,
)
from vive_hid.exceptions import ConfigSizeMismatchError, ProtocolError
from vive_hid.report import ReportCodec
from vive_hid.retry import with_retries

logger = logging.getLogger(__name__)


def read_steam_config_blob(codec: ReportCodec) -> bytes:
    """Read the compressed config stream from the Steam link box.

    Every feature read is retried on transport failure.

    Args:
        codec: Report codec of an opened Steam device.

    Returns:
        The raw (still compressed) config bytes.

    Raises:
        ConfigReadFailedError: If a read keeps failing.
        ProtocolError: If a chunk declares more data than a report holds.
    """
    with_retries(lambda: codec.get_feature(STEAM_REPORT_CONFIG_INIT))

    out = bytearray()
    while True:
        report = with_retries(lambda: codec.get_feature(STEAM_REPORT_CONFIG_CHUNK))
        size = report[1]
        if size == 0:
            break
        if size > REPLY_PAYLOAD_MAX:
            raise ProtocolError("wrong size")
        out += report[2 : 2 + size]

    logger.debug("Read %d bytes of Steam config", len(out))
    return bytes(out)


def read_vive_config_length(codec: ReportCodec) -> int:
    """Ask the headset how many config bytes it holds.

    Raises:
        ProtocolError: If the reply is not a 4-byte length.
    """
    codec.write(VIVE_REPORT_CONFIG, VIVE_CONFIG_LENGTH_PREFIX)
    payload = codec.read(VIVE_REPORT_CONFIG, VIVE_CONFIG_LENGTH_PREFIX)
    if len(payload) != 4:
        raise ProtocolError("config length has 4 bytes")
    return int.from_bytes(payload, "little")


def read_vive_config_blob(codec: ReportCodec) -> bytes:
    """Read the config blob from the Vive headset.

    Args:
        codec: Report codec of an opened Vive device.

    Returns:
        The raw config bytes, header included.

    Raises:
        ConfigSizeMismatchError: If more bytes arrive than were declared.
        ProtocolError: If a reply does not match the request.
    """
    total_len = read_vive_config_length(codec)
    logger.debug("Vive config is %d bytes", total_len)

    out = bytearray()
    while len(out) < total_len:
        request = (
            VIVE_CONFIG_CHUNK_PREFIX
            + bytes([VIVE_CONFIG_CHUNK_OFFSET_SIZE])
            + len(out).to_bytes(4, "little")
        )
        codec.write(VIVE_REPORT_CONFIG, request)
        chunk = codec.read(VIVE_REPORT_CONFIG, VIVE_CONFIG_CHUNK_PREFIX)
        if not chunk:
            raise ProtocolError("empty config chunk")
        out += chunk

    # Only a final chunk running past the declared end gets here
    if len(out) != total_len:
        raise ConfigSizeMismatchError(total_len, len(out))

    return bytes(out)
