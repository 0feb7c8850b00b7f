import asyncio
import json
import pathlib
from enum import Enum
from typing import Any, Callable, Optional, Type, TypeVar, Union

import click
from granian.constants import Interfaces
from granian.server.embed import Server

from .asgi import serve_with_range
from .errors import DecodeError
from .log import LogLevels, configure_logging, logger
from .options import FileInfo, Options


_AnyCallable = Callable[..., Any]
FC = TypeVar('FC', bound=Union[_AnyCallable, click.Command])


class EnumType(click.Choice):
    def __init__(self, enum: Enum, case_sensitive=False) -> None:
        self.__enum = enum
        super().__init__(choices=[item.value for item in enum], case_sensitive=case_sensitive)

    def convert(self, value: Any, param: Optional[click.Parameter], ctx: Optional[click.Context]) -> Enum:
        if value is None or isinstance(value, Enum):
            return value

        converted_str = super().convert(value, param, ctx)
        return self.__enum(converted_str)


def _pretty_print_default(value: Optional[bool]) -> Optional[str]:
    if isinstance(value, bool):
        return 'enabled' if value else 'disabled'
    if isinstance(value, Enum):
        return value.value
    return value


def option(*param_decls: str, cls: Optional[Type[click.Option]] = None, **attrs: Any) -> Callable[[FC], FC]:
    attrs['show_envvar'] = True
    if 'default' in attrs:
        attrs['show_default'] = _pretty_print_default(attrs['default'])
    return click.option(*param_decls, cls=cls, **attrs)


def resolve_request_path(ctx):
    # percent-decoding is left to the file source, so prefer the raw path
    raw_path = ctx.scope.get('raw_path')
    if raw_path:
        try:
            path = raw_path.decode('utf8', errors='strict')
        except UnicodeDecodeError as exc:
            raise DecodeError(message='failed to decode') from exc
        return FileInfo(path.split('?', 1)[0])
    return FileInfo(ctx.path)


def build_app(
    root: pathlib.Path,
    allow_download: bool = True,
    access_log: bool = False,
    access_log_fmt: Optional[str] = None,
):
    options = Options.from_resolvers(
        resolve_filepath=resolve_request_path,
        root=str(root),
        allow_download=allow_download,
    )
    return serve_with_range(options, access_log=access_log, access_log_fmt=access_log_fmt)


@click.command(
    context_settings={'show_default': True},
    help='ROOT  Directory to serve files from.  [required]',
)
@click.argument(
    'root',
    required=True,
    type=click.Path(exists=True, file_okay=False, dir_okay=True, readable=True, path_type=pathlib.Path),
)
@option('--host', default='127.0.0.1', help='Host address to bind to')
@option('--port', type=int, default=8000, help='Port to bind to.')
@option(
    '--allow-download/--no-allow-download',
    default=True,
    help='Serve the full content of files to requests without a Range header',
)
@option('--log/--no-log', 'log_enabled', default=True, help='Enable logging')
@option('--log-level', type=EnumType(LogLevels), default=LogLevels.info, help='Log level')
@option(
    '--log-config',
    type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True, path_type=pathlib.Path),
    help='Logging configuration file (json)',
)
@option('--access-log/--no-access-log', 'log_access_enabled', default=False, help='Enable access log')
@option('--access-log-fmt', 'log_access_fmt', help='Access log format')
@click.version_option(message='%(prog)s %(version)s')
def cli(
    root: pathlib.Path,
    host: str,
    port: int,
    allow_download: bool,
    log_enabled: bool,
    log_level: LogLevels,
    log_config: Optional[pathlib.Path],
    log_access_enabled: bool,
    log_access_fmt: Optional[str],
) -> None:
    log_dictconfig = None
    if log_config:
        with log_config.open() as log_config_file:
            try:
                log_dictconfig = json.loads(log_config_file.read())
            except Exception:
                click.echo('Unable to parse provided logging config.', err=True)
                raise click.exceptions.Exit(1)

    log_dictconfig = configure_logging(log_level, log_dictconfig, log_enabled)

    app = build_app(
        root,
        allow_download=allow_download,
        access_log=log_access_enabled,
        access_log_fmt=log_access_fmt,
    )
    server = Server(
        app,
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        log_enabled=log_enabled,
        log_level=log_level,
        log_dictconfig=log_dictconfig,
    )
    logger.info(f'Serving files from {root.resolve()} on http://{host}:{port}')
    asyncio.run(server.serve())


def entrypoint():
    cli(auto_envvar_prefix='RANGESERVE')
