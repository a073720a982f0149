"""
Domain-specific exception hierarchy for the booking grid.
"""


class BookingGridError(Exception):
    """Base class for all application-level errors."""


class SourceUnavailableError(BookingGridError):
    """Raised when busy intervals cannot be fetched or parsed."""


class NavigatorStateError(BookingGridError):
    """Raised when the week navigator is driven out of order."""


class ConfigError(BookingGridError):
    """Raised when the configuration file is missing or invalid."""
