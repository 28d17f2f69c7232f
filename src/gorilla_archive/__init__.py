"""Gorilla Tag version archive service."""

__version__ = "1.0.0"
