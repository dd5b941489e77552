"""Vigil — in-process health check aggregator."""

__version__ = "0.1.0"
