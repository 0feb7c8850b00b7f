import asyncio
import multiprocessing as mp
import socket
from contextlib import asynccontextmanager, closing
from functools import partial
from pathlib import Path

import httpx
import pytest
from granian import Granian

from rangeserve import Options, serve_with_range


def _serve(**kwargs):
    server = Granian('tests.apps.asgi:app', interface='asgi', **kwargs)
    server.serve()


@asynccontextmanager
async def _server(port):
    succeeded, spawn_failures = False, 0
    while spawn_failures < 3:
        proc = mp.get_context('spawn').Process(target=_serve, kwargs={'port': port})
        proc.start()

        conn_failures = 0
        while conn_failures < 3:
            try:
                await asyncio.sleep(1.5)
                sock = socket.create_connection(('127.0.0.1', port), timeout=1)
                sock.close()
                succeeded = True
                break
            except Exception:
                conn_failures += 1
        if succeeded:
            break

        proc.terminate()
        proc.join()
        spawn_failures += 1

    if not succeeded:
        raise RuntimeError('Cannot bind server')

    try:
        yield port
    finally:
        proc.terminate()
        proc.join()


@pytest.fixture(scope='function')
def server_port():
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as sock:
        sock.bind(('localhost', 0))
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return sock.getsockname()[1]


@pytest.fixture(scope='function')
def asgi_server(server_port):
    return partial(_server, server_port)


@pytest.fixture(scope='function')
def project_cwd(monkeypatch):
    monkeypatch.chdir(Path(__file__).parent.parent)


def _client(app):
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url='http://testserver')


@pytest.fixture(scope='function')
def client():
    return _client


@pytest.fixture(scope='function')
def make_request():
    async def request(path='/', range_header=None, method='GET', **options):
        app = serve_with_range(Options.from_resolvers(**options))
        headers = {'range': range_header} if range_header is not None else {}
        async with _client(app) as client:
            return await client.request(method, path, headers=headers)

    return request
