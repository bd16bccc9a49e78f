"""
Error taxonomy for Maven publishing.

Every failure of a publish surfaces as one of these; nothing is recovered
locally.
"""

from typing import Optional


class PublishError(Exception):
    """Base class for all publishing failures."""

    kind = 'publish'

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


class ValidationError(PublishError):
    """Missing or malformed artifacts, coordinates or configuration."""

    kind = 'validation'


class AuthenticationError(PublishError):
    """Credentials missing, empty or rejected by the repository."""

    kind = 'authentication'


class NetworkError(PublishError):
    """Repository unreachable, timed out or answered unexpectedly."""

    kind = 'network'


class ConflictError(PublishError):
    """Version already published and the repository forbids overwrite."""

    kind = 'conflict'
