"""Rebalancing stable/volatile custody vault."""

__version__ = "0.1.0"
