"""
WordPlay Configuration.

Environment variables, settings, and logging configuration.
"""

from wordplay.config.settings import Settings, configure_logging, get_settings

__all__ = ["Settings", "configure_logging", "get_settings"]
