"""HTTP Range header parsing for single byte-range requests."""

import re
from dataclasses import dataclass
from typing import Optional


_range_re = re.compile(r'bytes=([0-9]*)-([0-9]*)')


@dataclass(frozen=True)
class ByteRange:
    start: int
    end: int
    total_length: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def is_satisfiable(self) -> bool:
        return self.start <= self.end < self.total_length


def parse_range(range_header: Optional[str], total_length: int) -> Optional[ByteRange]:
    """
    Parse the first byte range of an HTTP Range header.

    Args:
        range_header: The Range header value (e.g., "bytes=0-499")
        total_length: The size of the entity the range applies to

    Returns:
        A `ByteRange` with an inclusive `end`, or None when no range was
        requested. Missing bounds default to the entity edges, so
        "bytes=500-" ends at `total_length - 1` and "bytes=-500" starts at 0.
        Bounds are not checked against `total_length`.

    Examples:
        >>> parse_range("bytes=0-499", 1000)
        ByteRange(start=0, end=499, total_length=1000)
        >>> parse_range("bytes=500-", 1000)
        ByteRange(start=500, end=999, total_length=1000)
        >>> parse_range("bytes=-1-3", 1000)
        ByteRange(start=0, end=1, total_length=1000)
        >>> parse_range("bytes=0-49,50-99", 1000)
        ByteRange(start=0, end=49, total_length=1000)
    """
    if not range_header:
        return None

    start, end = None, None
    match = _range_re.search(range_header)
    if match:
        start_str, end_str = match.groups()
        start = int(start_str) if start_str else None
        end = int(end_str) if end_str else None

    if end is None:
        end = total_length - 1
    if start is None:
        start = 0

    return ByteRange(start=start, end=end, total_length=total_length)
