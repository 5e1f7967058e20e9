"""
Exception types shared across the portfolio tracker.
"""

from typing import Optional


class ValidationError(Exception):
    """Raised when form input is missing or not a valid positive number."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)


class FetchError(Exception):
    """Raised when a quote or the portfolio store cannot be reached."""

    def __init__(self, message: str, ticker: Optional[str] = None):
        self.message = message
        self.ticker = ticker
        super().__init__(message)


class QuoteNotFoundError(FetchError):
    """Raised when the quote API has no price for a ticker."""
    pass


class ConfigError(Exception):
    """Raised when a required setting is missing. Fatal at startup."""
    pass


class DeliveryError(Exception):
    """Raised when a notification could not be delivered."""
    pass
