"""Configuration package for the webhook relay."""

from .base import BaseSettings
from .relay import RelaySettings, get_settings

__all__ = ["BaseSettings", "RelaySettings", "get_settings"]
