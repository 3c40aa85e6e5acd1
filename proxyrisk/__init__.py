"""Validate proxies and keep those whose outbound IP has a zero fraud score."""

__version__ = "0.1.0"