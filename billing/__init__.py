"""Utility billing for tenants of shared properties."""

__version__ = "0.1.0"
