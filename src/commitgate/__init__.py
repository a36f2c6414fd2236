"""commitgate — commit policy checks."""

__version__ = "0.1.0"
