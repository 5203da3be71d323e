"""taskflow: console client for a REST todo backend."""

__version__ = "0.1.0"
