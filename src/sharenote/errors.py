from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Note not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when the shared secret is missing or wrong.

    The message is deliberately the same in both cases.
    """

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""


class ShareError(UserError):
    """Raised when a note cannot be turned into a share link."""
