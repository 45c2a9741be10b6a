"""
Centralized exception hierarchy for domain-specific errors.

This module provides custom exception classes that represent specific
error conditions in the application, enabling better error handling and
client-side error recovery.
"""


class FootprintError(Exception):
    """Base exception for all application-specific errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(FootprintError):
    """Exception raised when client-supplied data is out of contract."""


class ExternalServiceError(FootprintError):
    """Exception raised when service calls fail."""


class ResolverUnavailableError(ExternalServiceError):
    """Reverse geocoding provider is down, slow or not configured."""


class AuthenticationError(FootprintError):
    """Exception raised when authentication fails."""


class ResourceNotFoundError(FootprintError):
    """Exception raised when a requested resource is not found."""


class PersistenceConflictError(FootprintError):
    """Concurrent writers raced on the same city visit row."""


class IngestionTimeoutError(FootprintError):
    """Ingesting a sample exceeded its end-to-end time budget."""


FootprintException = FootprintError
ValidationException = ValidationError
ExternalServiceException = ExternalServiceError
ResolverUnavailableException = ResolverUnavailableError
AuthenticationException = AuthenticationError
ResourceNotFoundException = ResourceNotFoundError
PersistenceConflictException = PersistenceConflictError
IngestionTimeoutException = IngestionTimeoutError
