"""Summary file loading.

Summaries are markdown files produced by a pipeline step. They are
size-checked before reading so that an oversized file is rejected
without loading it.
"""

from __future__ import annotations

import logging
import os

from harness_annotations.exceptions import SummaryReadError, SummaryTooLargeError
from harness_annotations.models.config import MAX_SUMMARY_FILE_BYTES

logger = logging.getLogger(__name__)


def read_summary_file(path: str, max_bytes: int = MAX_SUMMARY_FILE_BYTES) -> str:
    """Read a summary file into a string.

    Args:
        path: Path to the summary file. An empty path means "no summary".
        max_bytes: Largest accepted file size in bytes.

    Returns:
        The file content. Invalid UTF-8 sequences become U+FFFD.

    Raises:
        SummaryReadError: If the file is missing or unreadable.
        SummaryTooLargeError: If the file is larger than ``max_bytes``.
    """
    if not path:
        return ""

    try:
        size = os.stat(path).st_size
    except OSError as e:
        raise SummaryReadError(path, e.strerror or str(e)) from e

    if size > max_bytes:
        raise SummaryTooLargeError(path, size, max_bytes)

    try:
        with open(path, "rb") as f:
            data = f.read(max_bytes + 1)
    except OSError as e:
        raise SummaryReadError(path, e.strerror or str(e)) from e

    # The file may have grown since the stat call.
    if len(data) > max_bytes:
        raise SummaryTooLargeError(path, len(data), max_bytes)

    logger.debug("Read summary file %s (%d bytes)", path, len(data))
    return data.decode("utf-8", errors="replace")
