from .constants import Outcomes
from .context import Context
from .dispatch import dispatch
from .errors import ConfigurationError
from .options import BufferPlan, FilePlan, Options, StreamPlan
from .sources import BufferSource, FileSource, StreamSource


_sources = {
    FilePlan: FileSource,
    BufferPlan: BufferSource,
    StreamPlan: StreamSource,
}


async def _serve_plan(ctx: Context, options: Options, plan_type: type) -> Outcomes:
    assert ctx is not None, 'request context required'
    if not isinstance(options.source, plan_type):
        raise ConfigurationError(f'{plan_type.__name__} required')
    return await dispatch(ctx, _sources[plan_type](options.source, options), options)


async def file(ctx: Context, options: Options) -> Outcomes:
    return await _serve_plan(ctx, options, FilePlan)


async def buffer(ctx: Context, options: Options) -> Outcomes:
    return await _serve_plan(ctx, options, BufferPlan)


async def any(ctx: Context, options: Options) -> Outcomes:
    return await _serve_plan(ctx, options, StreamPlan)


async def serve(ctx: Context, options: Options) -> Outcomes:
    assert ctx is not None, 'request context required'
    for plan_type in _sources:
        if isinstance(options.source, plan_type):
            return await _serve_plan(ctx, options, plan_type)
    raise ConfigurationError('Cannot resolve filepath or buffer or stream from request')
