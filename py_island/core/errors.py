"""Exceptions raised by the map generator."""


class MapConfigurationError(ValueError):
    """Raised when generation parameters cannot produce a usable map."""


class GenerationError(RuntimeError):
    """Raised when a pipeline stage finds its invariants violated."""
