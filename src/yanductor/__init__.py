"""Conductor-backed inventory with a local fallback cache."""

__version__ = "0.1.0"
