"""
Storage Layer.

This package handles persistence of the user's configuration, including the
registered email used to log in to the ESS portal.
"""

from .config_manager import ConfigManager, load_config

__all__ = ["ConfigManager", "load_config"]
