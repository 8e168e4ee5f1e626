"""
Pygame tap source.

Converts left mouse clicks and touch-screen finger presses into TapEvents.
The host's event loop feeds every pygame event to handle_pygame_event();
the source keeps only the ones that are taps.
"""

import time
from typing import Callable, List

import pygame

from goop.input.sources.base import TapSource
from goop.input.tap_event import TapEvent
from goop.models import Point2D


class PygameTapSource(TapSource):
    """Tap source backed by pygame mouse and touch events.

    Attributes:
        screen_width: Viewport width, used to scale normalized touch positions
        screen_height: Viewport height, used to scale normalized touch positions

    Examples:
        >>> source = PygameTapSource(720, 1280)
        >>> for event in pygame.event.get():
        ...     source.handle_pygame_event(event)
        >>> taps = source.poll_events()
    """

    def __init__(
        self,
        screen_width: int,
        screen_height: int,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.screen_width = screen_width
        self.screen_height = screen_height
        self._clock = clock
        self._event_queue: List[TapEvent] = []

    def resize(self, width: int, height: int) -> None:
        """Track a new viewport size for touch scaling."""
        self.screen_width = width
        self.screen_height = height

    def handle_pygame_event(self, event: pygame.event.Event) -> bool:
        """Queue a TapEvent if the pygame event is a tap.

        Args:
            event: Any pygame event

        Returns:
            True if the event was consumed as a tap
        """
        if event.type == pygame.MOUSEBUTTONDOWN:
            # Touch presses also arrive as emulated mouse clicks
            if event.button == 1 and not getattr(event, 'touch', False):
                self._queue(float(event.pos[0]), float(event.pos[1]))
                return True

        elif event.type == pygame.FINGERDOWN:
            # Finger positions are normalized (0.0 to 1.0)
            self._queue(event.x * self.screen_width, event.y * self.screen_height)
            return True

        return False

    def _queue(self, x: float, y: float) -> None:
        self._event_queue.append(TapEvent(
            position=Point2D(x=x, y=y),
            timestamp=self._clock(),
        ))

    def poll_events(self) -> List[TapEvent]:
        """Return queued taps and clear the queue."""
        events = self._event_queue.copy()
        self._event_queue.clear()
        return events

    def update(self, dt: float) -> None:
        """Nothing time-based to do; taps are queued as events arrive."""
        pass

    def clear(self) -> None:
        """Drop any queued taps."""
        self._event_queue.clear()
