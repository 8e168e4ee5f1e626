"""Tap sources - convert platform events into TapEvents."""
from goop.input.sources.base import TapSource

__all__ = ['TapSource']
