"""Utility modules for the API binding generator."""

from .config import ConfigManager, DEFAULT_CONFIG
from .http import HTTPClient
from .logging import ContextFormatter, LoggerFactory, log_with_context, StructuredLogFormatter

__all__ = [
    'ConfigManager',
    'DEFAULT_CONFIG',
    'HTTPClient',
    'ContextFormatter',
    'LoggerFactory',
    'log_with_context',
    'StructuredLogFormatter'
]
