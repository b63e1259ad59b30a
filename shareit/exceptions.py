class ShareItError(Exception):
    """Base class for every error the booking core raises on bad caller input."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ShareItError):
    pass


class UserNotFoundError(NotFoundError):
    pass


class ItemNotFoundError(NotFoundError):
    pass


class BookingNotFoundError(NotFoundError):
    pass


class BadRequestError(ShareItError):
    """A creation rule was violated or the state tag is unknown."""


class AccessDeniedError(ShareItError):
    """The caller does not hold the role the operation requires."""
