"""BoulderLog grade normalization and climber insights."""

__version__ = "1.0.0"
