from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple

from .constants import RANGE_UNIT, Outcomes
from .utils.range import ByteRange


HeaderList = List[Tuple[str, str]]


@dataclass(frozen=True)
class ContentDescriptor:
    length: int
    content_type: str
    headers: Optional[Mapping[str, str]] = None


def content_range(byte_range: Optional[ByteRange], total_length: int) -> str:
    if byte_range is None:
        return f'{RANGE_UNIT} */{total_length}'
    return f'{RANGE_UNIT} {byte_range.start}-{byte_range.end}/{total_length}'


def merge_headers(headers: HeaderList, overrides: Optional[Mapping[str, str]]) -> HeaderList:
    if not overrides:
        return headers
    names = {name.lower() for name in overrides}
    rv = [(name, value) for name, value in headers if name.lower() not in names]
    rv.extend((name, str(value)) for name, value in overrides.items())
    return rv


def build_headers(
    outcome: Outcomes,
    descriptor: Optional[ContentDescriptor],
    byte_range: Optional[ByteRange] = None,
    custom_headers: Optional[Mapping[str, str]] = None,
) -> HeaderList:
    if outcome == Outcomes.full_send:
        headers = [
            ('Content-Type', descriptor.content_type),
            ('Content-Length', str(descriptor.length)),
            ('Accept-Ranges', RANGE_UNIT),
        ]
    elif outcome == Outcomes.range_send:
        headers = [
            ('Content-Range', content_range(byte_range, descriptor.length)),
            ('Content-Length', str(byte_range.length)),
            ('Content-Type', descriptor.content_type),
            ('Accept-Ranges', RANGE_UNIT),
            ('Cache-Control', 'no-cache'),
        ]
    elif outcome == Outcomes.range_not_satisfiable:
        return [('Content-Range', content_range(None, descriptor.length))]
    else:
        return []

    if custom_headers is None:
        custom_headers = descriptor.headers
    return merge_headers(headers, custom_headers)
