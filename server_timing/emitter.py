"""Attach timing entries to the current response."""

import logging
from typing import Any, Optional

from server_timing.entry import HEADER_NAME, TimingEntry
from server_timing.response import as_response_handle, get_current_response

logger = logging.getLogger(__name__)


def force_submit(entry: TimingEntry, response: Optional[Any] = None) -> None:
    """
    Append the entry as one Server-Timing header, without checking whether
    timing is enabled.

    Args:
        entry: The entry to send
        response: Response to add the header to. Defaults to the response
            bound to the current request context.

    Raises:
        NoActiveResponseError: no response given and none is bound
        UnsupportedResponseError: the response cannot append headers
    """
    if entry is None:
        raise ValueError("Timing entry must not be None")

    handle = get_current_response() if response is None else as_response_handle(response)
    value = entry.header_value()
    handle.add_header(HEADER_NAME, value)
    logger.debug(f"{HEADER_NAME}: {value}")
