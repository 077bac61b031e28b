"""
Configuration package for the school fee engine.

Environment settings and logging configuration.
"""

from app.config.settings import Settings, get_settings, settings

__all__ = ['Settings', 'get_settings', 'settings']
