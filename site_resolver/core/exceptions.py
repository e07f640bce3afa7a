"""
Custom exceptions for the Company Website Resolver.
"""


class SiteResolverError(Exception):
    """Base exception for all Company Website Resolver errors."""
    pass


class ConfigurationError(SiteResolverError):
    """Raised when there's an error in configuration loading or validation."""
    pass


class SpreadsheetError(SiteResolverError):
    """Raised when there's an error reading or writing company spreadsheets."""
    pass


class SearchAPIError(SiteResolverError):
    """Raised when there's an error with the search API."""
    pass


class RateLimitError(SearchAPIError):
    """Raised when the search API answers with a rate limit or quota error."""
    pass


class ResolutionError(SiteResolverError):
    """Raised when resolving a single company fails unexpectedly."""
    pass
