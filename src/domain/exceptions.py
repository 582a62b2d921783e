"""
domain.exceptions - Custom exception hierarchy for the mood journal.

All domain-level errors inherit from DomainError so callers can catch
broad or specific exceptions as needed.
"""


class DomainError(Exception):
    """Base exception for all domain-level errors."""


class InvalidInputError(DomainError):
    """Raised when a required input is missing or malformed."""


class EntryNotFoundError(DomainError):
    """Raised when an entry does not exist or belongs to another account."""


class RepositoryError(DomainError):
    """Raised when a database operation fails."""


class ImageStorageError(DomainError):
    """Raised when an uploaded image cannot be stored."""


class AIServiceError(DomainError):
    """Raised when the generative-AI service cannot be reached or returns nothing."""


class AuthenticationError(DomainError):
    """Raised when authentication fails (bad credentials, expired token)."""


class DuplicateLoginError(DomainError):
    """Raised when attempting to register with an email that already exists."""
