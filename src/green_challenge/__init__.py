"""Residence hall utility competition scoring."""

__version__ = "0.1.0"
