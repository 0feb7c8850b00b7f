from .asgi import serve_with_range as serve_with_range
from .constants import Outcomes as Outcomes
from .context import Context as Context
from .errors import (
    ConfigurationError as ConfigurationError,
    DecodeError as DecodeError,
    HTTPError as HTTPError,
    PathTraversalError as PathTraversalError,
)
from .facade import any as any, buffer as buffer, file as file, serve as serve
from .headers import ContentDescriptor as ContentDescriptor
from .options import (
    BufferInfo as BufferInfo,
    BufferPlan as BufferPlan,
    FileInfo as FileInfo,
    FilePlan as FilePlan,
    Options as Options,
    StreamMetadata as StreamMetadata,
    StreamPlan as StreamPlan,
)
from .utils.range import ByteRange as ByteRange, parse_range as parse_range


__version__ = '1.0.0'
