"""
Custom exceptions for multistar.

Errors raised at the boundaries of a conversion run: reading the pair table,
reading the reference tables and writing the catalog. Per-row
processing never raises.
"""


class MultistarError(Exception):
    """Base exception for all multistar-specific errors."""
    pass


class CatalogParsingError(MultistarError):
    """Raised when the pair catalog cannot be parsed."""
    pass


class FileFormatError(MultistarError):
    """Raised when a reference .stc file is missing or unreadable."""
    pass


class ReferenceTableError(MultistarError):
    """Raised when a stellar reference table is empty or malformed."""
    pass


class OutputWriteError(MultistarError):
    """Raised when the .stc output cannot be written."""
    pass


class ConversionProcessError(MultistarError):
    """Raised when the catalog conversion process fails."""
    pass


__all__ = [
    'MultistarError',
    'CatalogParsingError',
    'FileFormatError',
    'ReferenceTableError',
    'OutputWriteError',
    'ConversionProcessError'
]
