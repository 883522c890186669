"""Configuration package for the column statistics engine."""

from .settings import AnalysisSettings, settings
from .logging_config import setup_logging

__all__ = [
    'AnalysisSettings',
    'settings',
    'setup_logging'
]
