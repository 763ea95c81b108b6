"""
Configuration module for the Interchange pipeline driver.
"""

from .settings import InterchangeSettings, build_registry

__all__ = ["InterchangeSettings", "build_registry"]
