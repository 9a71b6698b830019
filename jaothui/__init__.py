"""JAOTHUI farm and livestock service."""

__version__ = "0.1.0"
