# File: app/utils/byte_range.py
"""
HTTP ``Range`` header handling for document downloads.

Only single byte ranges are served. Headers that are not a single
``bytes=`` range are ignored and the full content is returned.
"""

import re
from typing import Optional, Tuple

from app.core.exceptions import RangeNotSatisfiableException

_RANGE_RE = re.compile(r"^bytes=(\d*)-(\d*)$")


def parse_range_header(header: Optional[str], total_size: int) -> Optional[Tuple[int, int]]:
    """
    Resolve a Range header against content of ``total_size`` bytes.

    Args:
        header: Raw Range header value, or None
        total_size: Length of the full content

    Returns:
        Inclusive ``(start, end)`` offsets, or None to serve everything

    Raises:
        RangeNotSatisfiableException: If the range lies outside the content
    """
    if not header:
        return None

    match = _RANGE_RE.match(header.strip().replace(" ", ""))
    if not match:
        return None

    first, last = match.groups()
    if not first and not last:
        return None

    if not first:
        # Suffix range: the final N bytes
        suffix = int(last)
        if suffix == 0 or total_size == 0:
            raise RangeNotSatisfiableException(header, total_size)
        return max(total_size - suffix, 0), total_size - 1

    start = int(first)
    if last and int(last) < start:
        return None
    if start >= total_size:
        raise RangeNotSatisfiableException(header, total_size)
    end = int(last) if last else total_size - 1
    return start, min(end, total_size - 1)


def content_range(start: int, end: int, total_size: int) -> str:
    """Value of the Content-Range header for a partial response."""
    return f"bytes {start}-{end}/{total_size}"
