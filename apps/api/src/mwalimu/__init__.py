"""Mwalimu API - backend for the education management dashboard."""

__version__ = "0.1.0"
