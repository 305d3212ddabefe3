"""Custom exceptions for perpcore.

Read paths (prices, positions) degrade instead of raising; these exceptions
mark the places where degrading would be wrong, mostly order construction.
"""


class PerpCoreError(Exception):
    """Base exception for all perpcore errors."""


class PriceUnavailableError(PerpCoreError):
    """Raised when no usable price exists for a market."""


class StatsUnavailableError(PerpCoreError):
    """Raised when the 24h statistics endpoint cannot be read."""


class UnknownMarketError(PerpCoreError):
    """Raised when a market key is not one of the tracked markets."""


class InvalidOrderError(PerpCoreError):
    """Raised when an order intent cannot be turned into a safe payload."""
