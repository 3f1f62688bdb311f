"""Video and link bookmark manager."""

__version__ = "0.1.0"
