"""
Utility Modules

Configuration loading utilities.
"""

from contact_network.utils.config import load_config, Config

__all__ = ["load_config", "Config"]
