from __future__ import annotations


class ConfigurationError(ValueError):
    """Board dimensions or mine count that cannot describe a winnable game."""


class CellLookupError(IndexError):
    """Coordinates that do not resolve to exactly one cell."""
