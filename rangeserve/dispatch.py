from typing import Optional

from .constants import Outcomes
from .context import Context
from .headers import ContentDescriptor, build_headers
from .options import Options
from .sources import Source
from .utils.range import ByteRange, parse_range


def decide(
    descriptor: Optional[ContentDescriptor], byte_range: Optional[ByteRange], allow_download: bool = False
) -> Outcomes:
    if descriptor is None:
        return Outcomes.not_found
    # without an explicit range full content is served only on opt-in
    if byte_range is None:
        return Outcomes.full_send if allow_download else Outcomes.not_found
    if not byte_range.is_satisfiable():
        return Outcomes.range_not_satisfiable
    return Outcomes.range_send


async def dispatch(ctx: Context, source: Source, options: Options) -> Outcomes:
    descriptor = await source.resolve(ctx)
    byte_range = None
    if descriptor is not None:
        byte_range = parse_range(ctx.get('range'), descriptor.length)

    outcome = decide(descriptor, byte_range, options.allow_download)
    if outcome == Outcomes.not_found:
        return outcome

    ctx.set_headers(build_headers(outcome, descriptor, byte_range))
    if outcome == Outcomes.range_not_satisfiable:
        ctx.body = None
    else:
        ctx.body = await source.open(ctx, byte_range if outcome == Outcomes.range_send else None)
    ctx.status = outcome.status
    return outcome
