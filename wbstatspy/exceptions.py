"""Custom exceptions for the wbstatspy package."""

class WorldBankAPIError(Exception):
    """Base exception for World Bank API errors."""
    pass

class IndicatorNotFoundError(WorldBankAPIError):
    """Raised when a requested indicator does not exist or has been archived."""
    pass

class InvalidParameterError(WorldBankAPIError):
    """Raised when invalid parameters are provided to API calls."""
    pass

class DataParsingError(WorldBankAPIError):
    """Raised when there are issues parsing API response data."""
    pass
