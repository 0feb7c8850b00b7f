from enum import Enum


class StrEnum(str, Enum):
    def __str__(self) -> str:
        return str(self.value)


class Outcomes(StrEnum):
    not_found = 'not_found'
    full_send = 'full_send'
    range_send = 'range_send'
    range_not_satisfiable = 'range_not_satisfiable'
    bad_request = 'bad_request'

    @property
    def status(self) -> int:
        return _outcome_statuses[self]


_outcome_statuses = {
    Outcomes.not_found: 404,
    Outcomes.full_send: 200,
    Outcomes.range_send: 206,
    Outcomes.range_not_satisfiable: 416,
    Outcomes.bad_request: 400,
}

RANGE_UNIT = 'bytes'
DEFAULT_CONTENT_TYPE = 'application/octet-stream'
DEFAULT_CHUNK_SIZE = 64 * 1024
