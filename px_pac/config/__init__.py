"""
Configuration management for px-pac.

This module provides loading, saving and validation of resolver settings.
"""

from .config_manager import ConfigManager
from .resolver_settings import ResolverSettings

__all__ = ['ConfigManager', 'ResolverSettings']
