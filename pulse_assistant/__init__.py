"""Embedded storefront / donation assistant."""

__version__ = "1.0.0"
