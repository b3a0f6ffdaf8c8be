"""Verifying relay for Zoom webhook events."""

__version__ = "0.1.0"
