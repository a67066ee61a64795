"""
Domain-specific exception hierarchy for the booking availability engine.
"""


class BookingCheckError(Exception):
    """Base class for all application-level errors."""


class RepositoryError(BookingCheckError):
    """Raised when booking data cannot be loaded or parsed."""
