import time
from typing import Any, Callable, Optional

from .context import Context
from .errors import HTTPError
from .facade import serve
from .log import DEFAULT_ACCESSLOG_FMT, log_request_builder, logger
from .options import Options


class _LoggingSend:
    __slots__ = ['inner', 'status', 'body_length']

    def __init__(self, inner):
        self.inner = inner
        self.status = 500
        self.body_length = 0

    def __call__(self, message):
        if message['type'] == 'http.response.start':
            self.status = message['status']
        elif message['type'] == 'http.response.body':
            self.body_length += len(message.get('body', b''))
        return self.inner(message)


async def _lifespan(receive, send):
    while True:
        message = await receive()
        if message['type'] == 'lifespan.startup':
            await send({'type': 'lifespan.startup.complete'})
        elif message['type'] == 'lifespan.shutdown':
            await send({'type': 'lifespan.shutdown.complete'})
            return


async def handle(ctx: Context, options: Options):
    try:
        ctx.outcome = await serve(ctx, options)
    except HTTPError as exc:
        if exc.status >= 500:
            logger.error(f'Failed serving {ctx.method} {ctx.path}: {exc.message}', exc_info=exc.__cause__)
        ctx.error(exc.status, exc.message)
    except Exception:
        logger.exception(f'Unhandled error serving {ctx.method} {ctx.path}')
        ctx.error(500)


def serve_with_range(
    options: Options,
    app: Optional[Callable[..., Any]] = None,
    access_log: bool = False,
    access_log_fmt: Optional[str] = None,
):
    """
    Build an ASGI application serving content through `options`.

    When the content is not found (or full downloads are not allowed and no
    range was requested) the request is handed over to `app` if given,
    otherwise a 404 is returned.
    """
    log_request = log_request_builder(access_log_fmt or DEFAULT_ACCESSLOG_FMT) if access_log else None

    async def respond(ctx, receive, send):
        await handle(ctx, options)
        if not ctx.handled and app is not None:
            return await app(ctx.scope, receive, send)
        await ctx.emit(send)

    async def handler(scope, receive, send):
        if scope['type'] != 'http':
            if app is not None:
                return await app(scope, receive, send)
            if scope['type'] == 'lifespan':
                await _lifespan(receive, send)
            return

        ctx = Context(scope)
        if log_request is None:
            return await respond(ctx, receive, send)

        t = time.time()
        proto = _LoggingSend(send)
        try:
            await respond(ctx, receive, proto)
        finally:
            log_request(t, ctx, proto.status, proto.body_length)

    return handler
