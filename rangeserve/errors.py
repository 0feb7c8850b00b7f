from http import HTTPStatus
from typing import Optional

from .constants import Outcomes


class RangeServeError(Exception):
    pass


class HTTPError(RangeServeError):
    status = 500

    def __init__(self, status: Optional[int] = None, message: Optional[str] = None):
        if status is not None:
            self.status = status
        self.message = message or HTTPStatus(self.status).phrase
        super().__init__(self.status, self.message)

    def __str__(self) -> str:
        return f'{self.status} {self.message}'


class DecodeError(HTTPError):
    status = Outcomes.bad_request.status


class PathTraversalError(HTTPError):
    status = 403


class ConfigurationError(HTTPError):
    status = 500

    def __init__(self, message: Optional[str] = None):
        super().__init__(message=message)
