"""Error types raised by topic commands and the broker adapter."""
from __future__ import annotations

from typing import Optional


class AdminError(Exception):
    """Base class for failures reported back to the command's caller.

    Attributes
    ----------
    status_code : int
        HTTP status used when the error crosses the REST surface.
    title : str
        Short human-readable summary of the problem type.
    """

    status_code: int = 500
    title: str = "Internal Server Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(AdminError):
    """The target topic of an operation is absent."""

    status_code = 404
    title = "Not Found"


class AlreadyExistsError(AdminError):
    """The topic to be created is already present."""

    status_code = 409
    title = "Conflict"


class FilterSyntaxError(AdminError):
    """A threshold expression does not match ``[comparator]<integer>``."""

    status_code = 400
    title = "Bad Request"

    def __init__(self, field_name: str, value: str) -> None:
        super().__init__(
            f"The {field_name} filter '{value}' is invalid, "
            "expected [<|>|<=|>=|=]<number>"
        )
        self.field_name = field_name
        self.value = value


class InvalidArgumentError(AdminError):
    status_code = 400
    title = "Bad Request"


class ConnectivityError(AdminError):
    """The broker management endpoint could not be reached."""

    status_code = 503
    title = "Service Unavailable"


class BrokerOperationError(AdminError):
    """The broker answered, but refused or failed the management request."""

    status_code = 502
    title = "Bad Gateway"

    def __init__(self, message: str, error_type: Optional[str] = None) -> None:
        super().__init__(message)
        self.error_type = error_type


class CommandUnavailableError(AdminError):
    """A command was invoked while its availability predicate is false."""

    status_code = 503
    title = "Service Unavailable"


class ConfirmationDeclined(Exception):
    """The user declined a confirmation prompt; no mutation was performed.

    Not an :class:`AdminError`: callers treat it as a quiet abort.
    """
