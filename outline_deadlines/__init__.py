"""Unit outline to deadline list converter."""

__version__ = "0.1.0"
