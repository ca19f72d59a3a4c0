"""Skylight for OTLP release publishing."""

__version__ = "0.1.0"
