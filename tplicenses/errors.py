"""Exception types raised across the license extraction pipeline."""

from __future__ import annotations


class TPLicensesError(RuntimeError):
    """Base class for tplicenses failures."""


class ConfigError(TPLicensesError):
    """Raised when the configuration file cannot be parsed."""


class CoordinateError(TPLicensesError, ValueError):
    """Raised when a dependency coordinate is not ``group:name:version``."""


class ArchiveError(TPLicensesError):
    """Raised when an artifact cannot be opened or read as an archive."""


class IndexFormatError(ArchiveError):
    """Raised when the license index document is not a JSON object."""


class SegmentRangeError(TPLicensesError, IndexError):
    """Raised when an index entry points outside the license text blob."""


class ResolutionError(TPLicensesError):
    """Raised by artifact resolvers when a coordinate cannot be resolved."""


class AmbiguousArtifactError(ResolutionError):
    """Raised when several distinct files match one coordinate."""


__all__ = [
    "AmbiguousArtifactError",
    "ArchiveError",
    "ConfigError",
    "CoordinateError",
    "IndexFormatError",
    "ResolutionError",
    "SegmentRangeError",
    "TPLicensesError",
]
