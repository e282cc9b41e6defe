"""Synchronous client for the Styra DAS HTTP APIs."""

__version__ = "0.1.0"