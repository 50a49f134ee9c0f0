"""
Configuration for the triangulation layer.
"""

from .config import Settings, configure_logging, settings

__all__ = ['Settings', 'configure_logging', 'settings']
