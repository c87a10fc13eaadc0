from __future__ import annotations


class HubError(Exception):
    """Base error for the auth timestamp service."""


class ValidationError(HubError):
    """Raised when user input is invalid."""


class ExternalServiceError(HubError):
    """Raised when the remote timestamp store cannot be reached."""


class RevocationReadError(HubError):
    """Raised when the revocation timestamp of a bucket cannot be read."""


class RevocationWriteError(HubError):
    """Raised when the revocation timestamp of a bucket cannot be written."""


class AuthTimestampSizeError(RevocationWriteError, ValidationError):
    """Raised when an encoded timestamp exceeds the auth file size limit."""
