"""
Configuration package - unified access point.

This package provides all configuration classes and the global config instance.
"""

from org_admin.core.config.options import RunOptions
from org_admin.core.config.settings import Config, config

__all__ = [
    "Config",
    "RunOptions",
    "config",
]
