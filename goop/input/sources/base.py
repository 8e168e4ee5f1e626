"""
Abstract base class for tap sources.

Any coordinate-based input (mouse, touch screen, a test harness) becomes a
TapSource so the session never depends on where taps come from.
"""

from abc import ABC, abstractmethod
from typing import List

from goop.input.tap_event import TapEvent


class TapSource(ABC):
    """Abstract base class for tap sources.

    Subclasses must implement:
        - poll_events(): Return new taps since last poll
        - update(dt): Update source state for time-based processing
    """

    @abstractmethod
    def poll_events(self) -> List[TapEvent]:
        """Get new taps since last poll, then clear the internal queue.

        Returns:
            List of TapEvent objects, empty list if no taps
        """
        pass

    @abstractmethod
    def update(self, dt: float) -> None:
        """Update source state once per frame.

        Args:
            dt: Delta time in seconds since last update
        """
        pass
