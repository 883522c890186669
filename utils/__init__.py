"""Utilities package for the column statistics engine."""

from .scheduler import LiveUpdateScheduler

__all__ = ['LiveUpdateScheduler']
