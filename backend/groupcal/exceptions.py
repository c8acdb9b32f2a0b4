"""
Exceptions raised by the calendar store, the backends and the business layer.
"""
from typing import Optional


class GroupcalError(Exception):
    """Base exception for groupcal errors."""


class BusinessLayerError(GroupcalError):
    """
    The single error kind surfaced by the business layer.

    Carries an HTTP-style status code when the failure maps to one, and the
    wrapped cause when it was raised while handling another error.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.cause = cause


class DoesNotExistError(GroupcalError):
    """Raised when no calendar row matches a query."""


class MultipleObjectsReturnedError(GroupcalError):
    """Raised when a query that should match one row matches several."""


class DuplicateRecordError(GroupcalError):
    """Raised when a write violates the (public_uri, user_id) uniqueness."""


class BackendError(GroupcalError):
    """Raised when a calendar backend fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class BackendNotFoundError(BackendError):
    """Raised when no backend is registered under the requested name."""


class CacheOutDatedError(GroupcalError):
    """Raised when a backend reports that the local cache is stale."""
