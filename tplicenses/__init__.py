"""Generate a deduplicated third-party license catalog from dependency artifacts."""

__version__ = "0.1.0"
