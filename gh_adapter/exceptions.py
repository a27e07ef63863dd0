"""Typed failures raised by adapter operations."""

from typing import Any


class AdapterError(Exception):
    """Base class for every failure an adapter operation can raise."""


class AuthenticationFailure(AdapterError):
    """Credentials were rejected by the remote platform."""


class NotFoundFailure(AdapterError):
    """Unknown repository scope or entity id."""


class MergeRejected(AdapterError):
    """The remote reported that a pull request merge did not succeed."""

    def __init__(self, remote_message: str):
        self.remote_message = remote_message
        super().__init__(f"Merge failed: {remote_message}")


class TransportFailure(AdapterError):
    """Network or HTTP error that is not classified more precisely."""

    def __init__(self, message: str, status: int | None = None, data: Any = None):
        super().__init__(message)
        self.status = status
        self.data = data


class ListingTimeout(TransportFailure):
    """A paginated listing ran past its time budget."""


class OperationCancelled(AdapterError):
    """The caller cancelled a multi-page fetch between pages."""
