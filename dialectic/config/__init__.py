"""
Configuration - JSON config files plus DIALECTIC_* environment overrides.
"""

from .loader import ConfigLoader, DialecticConfig, load_config, parse_bool

__all__ = ["ConfigLoader", "DialecticConfig", "load_config", "parse_bool"]
