"""Incrementally mirrors GitHub accounts' repositories onto local disk."""

__version__ = "0.1.0"
