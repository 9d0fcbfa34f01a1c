"""fluencectl: Fluence project CLI built around a versioned config engine."""

__version__ = "0.1.0"
