"""
Exception types for brewing-calc.

All exceptions inherit from BrewingCalcError for easy catching
of any library-related errors. The numeric calculation core itself
does not raise for in-domain input; these cover the boundaries
(unit parsing, catalog data, configuration and storage).
"""


class BrewingCalcError(Exception):
    """Base exception for all brewing-calc errors."""

    pass


class UnitConversionError(BrewingCalcError):
    """Raised when a unit conversion fails."""

    pass


class NormalisationError(BrewingCalcError):
    """Raised when a raw catalog entry cannot be mapped to a preset."""

    pass


class CatalogError(BrewingCalcError):
    """Raised when a catalog lookup cannot be satisfied."""

    pass


class ConfigurationError(BrewingCalcError):
    """Raised when configuration is invalid or missing."""

    pass


class StorageError(BrewingCalcError):
    """
    Raised by the convenience storage wrappers.

    Carries the StorageErrorType so callers can still tell a corrupted
    value apart from an unavailable backend.
    """

    def __init__(self, message: str, error_type: str | None = None):
        super().__init__(message)
        self.error_type = error_type


class QuotaExceededError(BrewingCalcError):
    """Raised by a key-value backend when a write exceeds its capacity."""

    pass
