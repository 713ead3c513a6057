from typing import Any, Optional


class BidScopeError(Exception):
    """Base exception for BidScope errors."""
    pass

class ConfigError(BidScopeError):
    """Configuration loading specific errors."""
    pass

class DataSourceError(BidScopeError):
    """Data ingestion specific errors."""
    pass

class DataFormatError(BidScopeError, ValueError):
    """A record field could not be interpreted (bad timestamp, missing deadline)."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.field = field
        self.value = value

class DivisionByZeroError(BidScopeError, ZeroDivisionError):
    """A ratio was requested against a zero baseline where no fallback is defined."""

    def __init__(self, message: str, tender_id: Optional[str] = None):
        super().__init__(message)
        self.tender_id = tender_id
