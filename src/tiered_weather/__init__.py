"""Tiered weather data access layer."""

__version__ = "0.1.0"
