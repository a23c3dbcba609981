"""Tulip factory API nodes for flow-based automation."""

__version__ = "0.1.0"
