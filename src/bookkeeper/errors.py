"""Exception types shared by the tracker, planner and HTTP layer."""


class BookkeeperError(Exception):
    """Base exception for bookkeeper errors."""

    pass


class ValidationError(BookkeeperError):
    """Raised when a required field is missing or a value is out of range.

    Nothing has been written when this is raised.
    """

    pass


class NotFoundError(BookkeeperError):
    """Raised when a referenced account, book or plan does not exist."""

    pass


class ConflictError(BookkeeperError):
    """Raised when a concurrent update overwrote the record being saved."""

    pass


class AuthenticationError(BookkeeperError):
    """Raised when a presented credential cannot be verified."""

    pass


class UnexpectedError(BookkeeperError):
    """Raised when the persistence layer fails."""

    pass
