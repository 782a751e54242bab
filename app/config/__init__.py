"""
Configuration package for the hostel allocation service.

This package contains the configuration modules for the application:
environment settings and logging.
"""

from app.config.settings import Settings, get_settings, settings
from app.config.logging import get_logger, setup_logging

__all__ = ['Settings', 'get_settings', 'settings', 'get_logger', 'setup_logging']
