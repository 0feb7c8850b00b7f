import errno
import inspect
import mimetypes
import os
import stat
from typing import Any, Callable, Mapping, Optional

import anyio

from .constants import DEFAULT_CONTENT_TYPE
from .context import Context
from .errors import ConfigurationError, HTTPError
from .headers import ContentDescriptor
from .options import BufferInfo, BufferPlan, FileInfo, FilePlan, Options, StreamMetadata, StreamPlan
from .utils.paths import decode_path, resolve_path
from .utils.range import ByteRange


NOT_FOUND_ERRNOS = frozenset({errno.ENOENT, errno.ENAMETOOLONG, errno.ENOTDIR})


async def _call(resolver: Callable[..., Any], *args: Any) -> Any:
    rv = resolver(*args)
    if inspect.isawaitable(rv):
        rv = await rv
    return rv


def _coerce(value: Any, cls: type) -> Any:
    if isinstance(value, Mapping):
        return cls(**value)
    return value


async def stat_file(path: str) -> Optional[os.stat_result]:
    try:
        rv = await anyio.Path(path).stat()
    except OSError as exc:
        if exc.errno in NOT_FOUND_ERRNOS:
            return None
        raise HTTPError(500, f'Unable to stat {path}') from exc
    if stat.S_ISDIR(rv.st_mode):
        return None
    return rv


class FileWindow:
    """Open binary file read in chunks up to the end of an inclusive byte window."""

    def __init__(self, f: anyio.AsyncFile, length: Optional[int], chunk_size: int):
        self.file = f
        self.remaining = length
        self.chunk_size = chunk_size

    def __aiter__(self):
        return self

    async def __anext__(self) -> bytes:
        if self.remaining is not None and self.remaining <= 0:
            raise StopAsyncIteration
        size = self.chunk_size if self.remaining is None else min(self.chunk_size, self.remaining)
        chunk = await self.file.read(size)
        if not chunk:
            raise StopAsyncIteration
        if self.remaining is not None:
            self.remaining -= len(chunk)
        return chunk

    async def aclose(self):
        await self.file.aclose()


async def open_file(path: str, start: int, end: Optional[int], chunk_size: int) -> FileWindow:
    try:
        f = await anyio.open_file(path, 'rb')
    except OSError as exc:
        raise HTTPError(500, f'Unable to open {path}') from exc
    try:
        if start:
            await f.seek(start)
    except OSError as exc:
        await f.aclose()
        raise HTTPError(500, f'Unable to read {path}') from exc
    return FileWindow(f, None if end is None else end - start + 1, chunk_size)


def is_stream(value: Any) -> bool:
    if value is None or isinstance(value, str):
        return False
    if isinstance(value, (bytes, bytearray, memoryview)):
        return True
    return any(hasattr(value, attr) for attr in ('__aiter__', 'read', '__iter__'))


class Source:
    def __init__(self, plan: Any, options: Options):
        self.plan = plan
        self.options = options

    async def resolve(self, ctx: Context) -> Optional[ContentDescriptor]:
        raise NotImplementedError

    async def open(self, ctx: Context, byte_range: Optional[ByteRange]) -> Any:
        raise NotImplementedError


class FileSource(Source):
    plan: FilePlan

    def __init__(self, plan: FilePlan, options: Options):
        super().__init__(plan, options)
        self.filepath: Optional[str] = None

    async def resolve(self, ctx):
        info = await _call(self.plan.resolve_filepath, ctx)
        if isinstance(info, (str, os.PathLike)):
            info = FileInfo(info)
        info = _coerce(info, FileInfo)
        if info is None or not info.filepath:
            raise ConfigurationError('filepath required')

        filepath = os.fspath(info.filepath)
        if filepath.startswith('/'):
            filepath = filepath[1:]
        filepath = resolve_path(self.options.root, decode_path(filepath))

        file_stat = await stat_file(filepath)
        if file_stat is None:
            return None

        self.filepath = filepath
        content_type = mimetypes.guess_type(filepath)[0] or DEFAULT_CONTENT_TYPE
        return ContentDescriptor(file_stat.st_size, content_type, info.headers)

    async def open(self, ctx, byte_range):
        if byte_range is None:
            return await open_file(self.filepath, 0, None, self.options.chunk_size)
        return await open_file(self.filepath, byte_range.start, byte_range.end, self.options.chunk_size)


class BufferSource(Source):
    plan: BufferPlan

    def __init__(self, plan: BufferPlan, options: Options):
        super().__init__(plan, options)
        self.buffer: Optional[memoryview] = None

    async def resolve(self, ctx):
        info = _coerce(await _call(self.plan.resolve_buffer, ctx), BufferInfo)
        buffer = getattr(info, 'buffer', None)
        if not isinstance(buffer, (bytes, bytearray, memoryview)):
            raise ConfigurationError('buffer required')

        self.buffer = memoryview(buffer).cast('B')
        return ContentDescriptor(self.buffer.nbytes, info.content_type or DEFAULT_CONTENT_TYPE, info.headers)

    async def open(self, ctx, byte_range):
        if byte_range is None:
            return self.buffer.tobytes()
        return self.buffer[byte_range.start : byte_range.end + 1].tobytes()


class StreamSource(Source):
    plan: StreamPlan

    async def resolve(self, ctx):
        metadata = _coerce(await _call(self.plan.resolve_stream_metadata, ctx), StreamMetadata)
        length = getattr(metadata, 'length', None)
        if not isinstance(length, int) or length < 0:
            raise ConfigurationError('stream metadata with a non-negative length required')
        return ContentDescriptor(length, metadata.content_type or DEFAULT_CONTENT_TYPE, metadata.headers)

    async def open(self, ctx, byte_range):
        stream = await _call(self.plan.resolve_stream, ctx, byte_range)
        if not is_stream(stream):
            raise ConfigurationError('stream required')
        return stream
