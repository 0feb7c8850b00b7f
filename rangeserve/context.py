import inspect
from http import HTTPStatus
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Tuple

from anyio import to_thread

from .constants import DEFAULT_CHUNK_SIZE, Outcomes
from .errors import HTTPError


class Context:
    """Per-request view over an ASGI scope, collecting the response to emit."""

    def __init__(self, scope: Dict[str, Any]):
        self.scope = scope
        self.method: str = scope.get('method', 'GET')
        self.path: str = scope.get('path', '/')
        self.headers: Dict[str, str] = {}
        for key, value in scope.get('headers', []):
            self.headers.setdefault(key.decode('latin-1').lower(), value.decode('latin-1'))
        self.response_headers: List[Tuple[str, str]] = []
        self.body: Any = None
        self.handled = False
        self.outcome: Optional[Outcomes] = None
        self._status = 404

    @property
    def status(self) -> int:
        return self._status

    @status.setter
    def status(self, value: int):
        self._status = value
        self.handled = True

    def get(self, name: str) -> str:
        return self.headers.get(name.lower(), '')

    def get_response_header(self, name: str) -> Optional[str]:
        name = name.lower()
        for key, value in self.response_headers:
            if key.lower() == name:
                return value
        return None

    def set(self, name: str, value: Any):
        self.remove(name)
        self.response_headers.append((name, str(value)))

    def set_headers(self, headers):
        items = headers.items() if isinstance(headers, Mapping) else headers
        for name, value in items:
            self.set(name, value)

    def remove(self, name: str):
        name = name.lower()
        self.response_headers = [(key, value) for key, value in self.response_headers if key.lower() != name]

    def throw(self, status: int, message: Optional[str] = None):
        raise HTTPError(status, message)

    def error(self, status: int, message: Optional[str] = None):
        self.response_headers = []
        self.body = (message or HTTPStatus(status).phrase).encode('utf8')
        self.set('Content-Type', 'text/plain; charset=utf-8')
        self.status = status

    async def emit(self, send):
        if not self.handled:
            self.error(404)

        body = self.body
        if isinstance(body, (bytes, bytearray, memoryview)):
            body = bytes(body)
            if self.get_response_header('content-length') is None:
                self.set('Content-Length', len(body))
        elif body is None and self.get_response_header('content-length') is None:
            self.set('Content-Length', 0)

        await send(
            {
                'type': 'http.response.start',
                'status': self.status,
                'headers': [
                    (name.lower().encode('latin-1'), value.encode('latin-1')) for name, value in self.response_headers
                ],
            }
        )

        if body is None or self.method == 'HEAD':
            await close_body(body)
            await send({'type': 'http.response.body', 'body': b'', 'more_body': False})
            return

        if isinstance(body, bytes):
            await send({'type': 'http.response.body', 'body': body, 'more_body': False})
            return

        try:
            async for chunk in iterate_body(body):
                if not chunk:
                    continue
                await send({'type': 'http.response.body', 'body': chunk, 'more_body': True})
        finally:
            await close_body(body)
        await send({'type': 'http.response.body', 'body': b'', 'more_body': False})


async def iterate_body(body: Any, chunk_size: int = DEFAULT_CHUNK_SIZE) -> AsyncIterator[bytes]:
    if isinstance(body, (bytes, bytearray, memoryview)):
        yield bytes(body)
    elif hasattr(body, '__aiter__'):
        async for chunk in body:
            yield bytes(chunk)
    elif hasattr(body, 'read'):
        # blocking readers are moved off the event loop
        while True:
            if inspect.iscoroutinefunction(body.read):
                chunk = await body.read(chunk_size)
            else:
                chunk = await to_thread.run_sync(body.read, chunk_size)
            if not chunk:
                break
            yield bytes(chunk)
    elif hasattr(body, '__iter__'):
        iterator = iter(body)
        while True:
            chunk = await to_thread.run_sync(next, iterator, None)
            if chunk is None:
                break
            yield bytes(chunk)
    else:
        raise TypeError(f'Unsupported response body type: {type(body).__name__}')


async def close_body(body: Any):
    closer = getattr(body, 'aclose', None) or getattr(body, 'close', None)
    if closer is None:
        return
    rv = closer()
    if inspect.isawaitable(rv):
        await rv
