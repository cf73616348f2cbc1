"""Error taxonomy shared by the fetch, mapping and library layers."""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Why an acquisition did not produce an artifact."""

    NOT_FOUND = "not_found"
    NETWORK_FAILURE = "network_failure"
    INTEGRITY_FAILURE = "integrity_failure"
    CONFIG_PARSE_FAILURE = "config_parse_failure"


class FetchError(Exception):
    """Raised by the HTTP layer; converted to a result at the fetcher boundary."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.NETWORK_FAILURE):
        super().__init__(message)
        self.message = message
        self.kind = kind


class InvalidCoordinateError(ValueError):
    """A coordinate string is not ``group:artifact:version``."""
