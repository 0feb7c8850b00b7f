import os
import re
from typing import Optional
from urllib.parse import unquote

from ..errors import DecodeError, HTTPError, PathTraversalError


_bad_escape_re = re.compile(r'%(?![0-9A-Fa-f]{2})')


def decode_path(path: str) -> str:
    """Percent-decode a request path, rejecting malformed escapes and non UTF-8 sequences."""
    if _bad_escape_re.search(path):
        raise DecodeError(message='failed to decode')
    try:
        return unquote(path, errors='strict')
    except UnicodeDecodeError as exc:
        raise DecodeError(message='failed to decode') from exc


def resolve_path(root: Optional[str], path: str) -> str:
    """
    Join a relative request path onto `root`, refusing to leave it.

    Absolute paths and paths holding NUL bytes are rejected as malicious (400);
    paths climbing above `root` are rejected as forbidden (403). An empty root
    means the current working directory.
    """
    if '\0' in path or os.path.isabs(path):
        raise HTTPError(400, 'Malicious Path')

    normalized = os.path.normpath(os.path.join(os.curdir, path))
    if normalized == os.pardir or normalized.startswith(os.pardir + os.sep):
        raise PathTraversalError()

    return os.path.normpath(os.path.join(os.path.abspath(root or os.curdir), normalized))
