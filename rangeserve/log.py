import copy
import datetime
import logging
import logging.config
import time
from typing import Any, Dict, Optional

from granian.log import LOGGING_CONFIG as SERVER_LOGGING_CONFIG, LogLevels, SafeAtoms, log_levels_map


# extends the embedded server configuration so both can be applied at once
LOGGING_CONFIG = {
    **SERVER_LOGGING_CONFIG,
    'loggers': {
        **SERVER_LOGGING_CONFIG['loggers'],
        'rangeserve': {'handlers': ['console'], 'level': 'INFO', 'propagate': False},
        'rangeserve.access': {'handlers': ['access'], 'level': 'INFO', 'propagate': False},
    },
}

DEFAULT_ACCESSLOG_FMT = (
    '[%(time)s] %(addr)s - "%(method)s %(path)s %(protocol)s" %(status)d %(outcome)s %(range)s %(rbl)s %(dt_ms).3f'
)

logger = logging.getLogger('rangeserve')
access_logger = logging.getLogger('rangeserve.access')


def build_logging_config(
    level: LogLevels, config: Optional[Dict[str, Any]] = None, enabled: bool = True
) -> Dict[str, Any]:
    log_config = copy.deepcopy(LOGGING_CONFIG)
    if config:
        log_config.update(config)

    log_config['loggers'].setdefault('rangeserve', {})['level'] = (
        log_levels_map[level] if enabled else logging.CRITICAL + 1
    )
    return log_config


def configure_logging(
    level: LogLevels, config: Optional[Dict[str, Any]] = None, enabled: bool = True
) -> Dict[str, Any]:
    """
    Apply the logging configuration and return it, so it can be handed over
    to the embedded server which configures logging on its own.
    """
    log_config = build_logging_config(level, config, enabled)
    logging.config.dictConfig(log_config)
    return log_config


def log_request_builder(fmt: str):
    local_tz = datetime.datetime.now().astimezone().tzinfo

    def log_request(rtime: float, ctx, status: int, body_length: int):
        scope = ctx.scope
        client = scope.get('client')
        atoms = {
            'addr': client[0] if client else '-',
            'time': datetime.datetime.fromtimestamp(rtime, tz=local_tz).strftime('%Y-%m-%d %H:%M:%S %z'),
            'dt_ms': (time.time() - rtime) * 1000,
            'status': status,
            'path': ctx.path,
            'query_string': scope.get('query_string', b'').decode('latin-1'),
            'method': ctx.method,
            'scheme': scope.get('scheme', 'http'),
            'protocol': 'HTTP/' + scope.get('http_version', '1.1'),
            'range': ctx.get('range') or '-',
            # response body length
            'rbl': body_length,
        }
        if ctx.outcome is not None:
            atoms['outcome'] = ctx.outcome.value
        atoms.update({'{%s}i' % name: value for name, value in ctx.headers.items()})
        access_logger.info(fmt, SafeAtoms(atoms))

    return log_request
