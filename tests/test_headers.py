import pytest

from rangeserve.constants import Outcomes
from rangeserve.headers import ContentDescriptor, build_headers, merge_headers
from rangeserve.utils.range import ByteRange


DESCRIPTOR = ContentDescriptor(10, 'text/plain')


def test_full_send():
    assert build_headers(Outcomes.full_send, DESCRIPTOR) == [
        ('Content-Type', 'text/plain'),
        ('Content-Length', '10'),
        ('Accept-Ranges', 'bytes'),
    ]


def test_range_send():
    assert build_headers(Outcomes.range_send, DESCRIPTOR, ByteRange(1, 3, 10)) == [
        ('Content-Range', 'bytes 1-3/10'),
        ('Content-Length', '3'),
        ('Content-Type', 'text/plain'),
        ('Accept-Ranges', 'bytes'),
        ('Cache-Control', 'no-cache'),
    ]


def test_range_not_satisfiable():
    assert build_headers(Outcomes.range_not_satisfiable, DESCRIPTOR, ByteRange(5, 100, 10)) == [
        ('Content-Range', 'bytes */10'),
    ]


@pytest.mark.parametrize('outcome', [Outcomes.not_found, Outcomes.bad_request])
def test_no_headers(outcome):
    assert build_headers(outcome, DESCRIPTOR) == []


@pytest.mark.parametrize(('start', 'end'), [(0, 0), (0, 9), (3, 7), (9, 9)])
def test_range_content_length(start, end):
    headers = dict(build_headers(Outcomes.range_send, DESCRIPTOR, ByteRange(start, end, 10)))
    assert headers['Content-Length'] == str(end - start + 1)


def test_custom_headers_appended_last():
    descriptor = ContentDescriptor(10, 'text/plain', {'X-Custom': 'yes'})
    headers = build_headers(Outcomes.full_send, descriptor)
    assert headers[-1] == ('X-Custom', 'yes')


def test_custom_headers_override():
    descriptor = ContentDescriptor(10, 'text/plain', {'cache-control': 'max-age=60', 'Content-Type': 'text/csv'})
    headers = build_headers(Outcomes.range_send, descriptor, ByteRange(0, 4, 10))
    assert headers == [
        ('Content-Range', 'bytes 0-4/10'),
        ('Content-Length', '5'),
        ('Accept-Ranges', 'bytes'),
        ('cache-control', 'max-age=60'),
        ('Content-Type', 'text/csv'),
    ]


def test_custom_headers_ignored_on_unsatisfiable():
    descriptor = ContentDescriptor(10, 'text/plain', {'X-Custom': 'yes'})
    assert build_headers(Outcomes.range_not_satisfiable, descriptor) == [('Content-Range', 'bytes */10')]


def test_explicit_custom_headers():
    headers = build_headers(Outcomes.full_send, DESCRIPTOR, custom_headers={'X-Custom': 1})
    assert ('X-Custom', '1') in headers


def test_merge_headers_noop():
    headers = [('Content-Type', 'text/plain')]
    assert merge_headers(headers, None) is headers
