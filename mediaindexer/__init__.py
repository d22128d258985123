"""Media library indexer."""

__version__ = "0.1.0"
