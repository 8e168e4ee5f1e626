"""Tap input for the scan overlay."""
from goop.input.tap_event import TapEvent
from goop.input.sources.base import TapSource

__all__ = ['TapEvent', 'TapSource']
