"""
Formguard Core Module
=====================

Configuration shared by every component.
"""

from formguard.core.config import Config, ConfigSource, get_config, reset_config

__all__ = [
    "Config",
    "ConfigSource",
    "get_config",
    "reset_config",
]
