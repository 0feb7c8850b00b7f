import os

import pytest

from rangeserve.errors import DecodeError, HTTPError, PathTraversalError
from rangeserve.utils.paths import decode_path, resolve_path


@pytest.mark.parametrize(
    ('value', 'expected'),
    (
        ('file.txt', 'file.txt'),
        ('tests%2Ffixtures%2Ffile.txt', 'tests/fixtures/file.txt'),
        ('%E3%81%93%E3%82%93.png', 'こん.png'),
        ('100%25', '100%'),
    ),
)
def test_decode_path(value, expected):
    assert decode_path(value) == expected


@pytest.mark.parametrize('value', ['tests%2Zfixtures', '%', 'file%2', '%C0%AF', '%FF'])
def test_decode_path_invalid(value):
    with pytest.raises(DecodeError) as exc:
        decode_path(value)
    assert exc.value.status == 400


def test_resolve_path(tmp_path):
    assert resolve_path(str(tmp_path), 'file.txt') == str(tmp_path / 'file.txt')
    assert resolve_path(str(tmp_path), 'a/../file.txt') == str(tmp_path / 'file.txt')
    assert resolve_path(str(tmp_path), '') == str(tmp_path)


def test_resolve_path_default_root(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert resolve_path(None, 'file.txt') == os.path.join(os.getcwd(), 'file.txt')


@pytest.mark.parametrize('value', ['..', '../file.txt', 'a/../../file.txt', '../leaves/package.json'])
def test_resolve_path_traversal(tmp_path, value):
    with pytest.raises(PathTraversalError) as exc:
        resolve_path(str(tmp_path), value)
    assert exc.value.status == 403


@pytest.mark.parametrize('value', ['/etc/passwd', 'file\0.txt'])
def test_resolve_path_malicious(tmp_path, value):
    with pytest.raises(HTTPError) as exc:
        resolve_path(str(tmp_path), value)
    assert exc.value.status == 400
