from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when a request carries no valid session or a wrong password."""

    def __init__(self, message: str = "Unauthorized, please log in") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""


class ConfigurationError(Exception):
    """Raised when a required setting (access password, signing key) is missing.

    This is a deployment defect rather than a per-request condition, so it is
    allowed to propagate out of services. The message names the missing
    setting and never its value.
    """
