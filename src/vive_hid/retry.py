"""Bounded retry for flaky transport reads."""

import logging
from collections.abc import Callable
from typing import TypeVar

from vive_hid.constants import MAX_READ_RETRIES
from vive_hid.exceptions import ConfigReadFailedError, DeviceCommunicationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def with_retries(operation: Callable[[], T], max_retries: int = MAX_READ_RETRIES) -> T:
    """Run a transport operation, retrying on communication failures.

    The operation is attempted until it succeeds or fails more than
    ``max_retries`` times in a row. There is no delay between attempts.
    Only DeviceCommunicationError is retried; anything else propagates.

    Args:
        operation: Zero-argument callable performing one transport call.
        max_retries: Consecutive failures tolerated before giving up.

    Returns:
        Whatever the operation returns on its first success.

    Raises:
        ConfigReadFailedError: If the retry budget is exhausted.
    """
    failures = 0
    while True:
        try:
            return operation()
        except DeviceCommunicationError as e:
            failures += 1
            logger.debug("Read failed (%d/%d): %s", failures, max_retries, e)
            if failures > max_retries:
                msg = f"Failed to read config after {failures} attempts"
                raise ConfigReadFailedError(msg) from e
