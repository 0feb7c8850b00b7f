import os
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

from .constants import DEFAULT_CHUNK_SIZE
from .errors import ConfigurationError


@dataclass
class FileInfo:
    filepath: Union[str, os.PathLike]
    headers: Optional[Mapping[str, str]] = None


@dataclass
class BufferInfo:
    buffer: Union[bytes, bytearray, memoryview]
    content_type: str
    headers: Optional[Mapping[str, str]] = None


@dataclass
class StreamMetadata:
    length: int
    content_type: str
    headers: Optional[Mapping[str, str]] = None


@dataclass(frozen=True)
class FilePlan:
    #: `(ctx) -> FileInfo | str`, sync or async
    resolve_filepath: Callable[..., Any]


@dataclass(frozen=True)
class BufferPlan:
    #: `(ctx) -> BufferInfo`, sync or async
    resolve_buffer: Callable[..., Any]


@dataclass(frozen=True)
class StreamPlan:
    #: `(ctx, ByteRange | None) -> bytes | Iterable[bytes] | AsyncIterable[bytes] | BinaryIO`
    resolve_stream: Callable[..., Any]
    #: `(ctx) -> StreamMetadata`
    resolve_stream_metadata: Callable[..., Any]


ContentSource = Union[FilePlan, BufferPlan, StreamPlan]


@dataclass(frozen=True)
class Options:
    source: Optional[ContentSource] = None
    allow_download: bool = False
    root: Optional[str] = None
    chunk_size: int = DEFAULT_CHUNK_SIZE

    @classmethod
    def from_resolvers(
        cls,
        resolve_filepath: Optional[Callable[..., Any]] = None,
        resolve_buffer: Optional[Callable[..., Any]] = None,
        resolve_stream: Optional[Callable[..., Any]] = None,
        resolve_stream_metadata: Optional[Callable[..., Any]] = None,
        **kwargs: Any,
    ) -> 'Options':
        if bool(resolve_stream) != bool(resolve_stream_metadata):
            raise ConfigurationError('resolve_stream and resolve_stream_metadata must be configured together')

        plans = []
        if resolve_filepath:
            plans.append(FilePlan(resolve_filepath))
        if resolve_buffer:
            plans.append(BufferPlan(resolve_buffer))
        if resolve_stream:
            plans.append(StreamPlan(resolve_stream, resolve_stream_metadata))

        if len(plans) > 1:
            raise ConfigurationError(
                'Only one of resolve_filepath, resolve_buffer or resolve_stream can be configured, '
                f'got: {", ".join(type(plan).__name__ for plan in plans)}'
            )

        return cls(source=plans[0] if plans else None, **kwargs)
