"""Plotwatch exception classes."""

from __future__ import annotations


class PlotwatchError(RuntimeError):
    """Base exception for Plotwatch errors."""


class UserError(PlotwatchError):
    """Errors that should be shown to user without traceback."""

    def __init__(self, message: str, rc: int = 2):
        super().__init__(message)
        self.rc = rc


class CommandFailureError(PlotwatchError):
    """Command failed - error message already printed, just need to exit.

    This exception is for cases where a command has already printed
    its error message and just needs to signal failure without
    additional output from main().
    """

    def __init__(self, rc: int = 1):
        super().__init__("")
        self.rc = rc


class FetchError(PlotwatchError):
    """A host snapshot could not be retrieved.

    Fetch errors are reported as the host's status text and never abort
    the poll loop.
    """

    def __init__(self, host: str, message: str):
        super().__init__(message)
        self.host = host


class NetworkError(FetchError):
    """Connection, HTTP or timeout failure while fetching a snapshot."""


class DecodeError(FetchError):
    """The host answered but the payload is not a valid snapshot."""
