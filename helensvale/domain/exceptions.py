"""
Domain-specific exception hierarchy for Helensvale Connect.
"""


class ConnectError(Exception):
    """Base class for all application-level errors."""


class InvalidInput(ConnectError, ValueError):
    """Raised when a caller passes malformed hours, durations or times."""


class NotFoundError(ConnectError):
    """Raised when a vendor or service cannot be found."""


class SlotUnavailableError(ConnectError):
    """Raised when a requested start time is not a bookable slot."""


class MarketplaceAPIError(ConnectError):
    """Raised when marketplace data cannot be fetched or parsed."""
