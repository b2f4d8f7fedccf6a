"""
Configuration package for the campus complaints system.

Holds environment settings and logging setup.
"""

from campus_complaints.config.settings import Settings, get_settings, settings
from campus_complaints.config.logging import get_logger, setup_logging

__all__ = ['Settings', 'get_settings', 'settings', 'get_logger', 'setup_logging']
