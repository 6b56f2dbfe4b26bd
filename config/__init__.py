"""
Configuration module for the ABNT document builder.
"""
from .constants import *
from .logging_config import setup_logger, get_logger
from .settings import Settings, settings

__all__ = [
    # Logging
    'setup_logger',
    'get_logger',
    # Settings
    'Settings',
    'settings',
    # Constants (all exported via *)
]
