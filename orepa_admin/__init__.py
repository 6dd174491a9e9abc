"""Operator commands for the OREPA membership database."""

__version__ = "0.1.0"
