"""Bolucompras: a personal shopping-list API."""

__version__ = "0.1.0"
