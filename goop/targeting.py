"""
On-screen targeting geometry.

Pure functions for placing a creature in the viewport, finding where it is
actually drawn (nominal position plus bounce), testing taps against it, and
pointing at it when it drifts too close to an edge.

All coordinates are viewport pixels with the origin at the top-left.
"""
import math
import random
from typing import Optional

from goop.models import Encounter, Indicator, Point2D, Resolution

# Placement band as fractions of the viewport
PLACEMENT_X_RANGE = (0.2, 0.8)
PLACEMENT_Y_RANGE = (0.3, 0.6)

DEFAULT_TAP_TOLERANCE = 0.8
DEFAULT_BOUNCE_AMPLITUDE = 20.0
DEFAULT_BOUNCE_PERIOD = 1.0
DEFAULT_INDICATOR_DISTANCE = 150.0


def place_creature(viewport: Resolution, rng: Optional[random.Random] = None) -> Point2D:
    """Pick a uniformly random spawn position inside the placement band.

    x is drawn from [0.2, 0.8] of the width and y from [0.3, 0.6] of the
    height, which keeps the creature away from the edges and the status bar.

    Args:
        viewport: Current viewport size
        rng: Uniform source (default: module RNG)

    Returns:
        Spawn position in viewport coordinates
    """
    r = rng or random
    x_lo, x_hi = PLACEMENT_X_RANGE
    y_lo, y_hi = PLACEMENT_Y_RANGE
    x = viewport.width * (x_lo + r.random() * (x_hi - x_lo))
    y = viewport.height * (y_lo + r.random() * (y_hi - y_lo))
    return Point2D(x=x, y=y)


def bounce_offset(
    elapsed: float,
    amplitude: float = DEFAULT_BOUNCE_AMPLITUDE,
    period: float = DEFAULT_BOUNCE_PERIOD,
) -> float:
    """Upward bounce offset after ``elapsed`` seconds, in [0, amplitude].

    The offset eases from 0 up to ``amplitude`` over ``period`` seconds and
    back down over the next ``period``, repeating forever.

    Examples:
        >>> bounce_offset(0.0)
        0.0
        >>> round(bounce_offset(1.0), 6)
        20.0
        >>> round(bounce_offset(0.5), 6)
        10.0
    """
    if amplitude <= 0 or elapsed <= 0:
        return 0.0
    phase = (elapsed / period) % 2.0
    progress = phase if phase <= 1.0 else 2.0 - phase
    eased = (1.0 - math.cos(math.pi * progress)) / 2.0
    return eased * amplitude


def rendered_center(
    encounter: Encounter,
    now: float,
    amplitude: float = DEFAULT_BOUNCE_AMPLITUDE,
    period: float = DEFAULT_BOUNCE_PERIOD,
) -> Point2D:
    """Where the creature is drawn at ``now``: its position lifted by the bounce."""
    offset = bounce_offset(now - encounter.spawned_at, amplitude, period)
    return Point2D(x=encounter.position.x, y=encounter.position.y - offset)


def hit_test(
    tap: Point2D,
    center: Point2D,
    creature_size: float,
    tolerance: float = DEFAULT_TAP_TOLERANCE,
) -> bool:
    """True if the tap lands within ``tolerance * creature_size`` of the center.

    Examples:
        >>> hit_test(Point2D(x=100.0, y=0.0), Point2D(x=0.0, y=0.0), 150.0)
        True
        >>> hit_test(Point2D(x=121.0, y=0.0), Point2D(x=0.0, y=0.0), 150.0)
        False
    """
    return tap.distance_to(center) <= creature_size * tolerance


def is_near_edge(center: Point2D, viewport: Resolution, margin: float) -> bool:
    """True if the center is within ``margin`` of any viewport edge (or past it)."""
    return (
        center.x < margin
        or center.x > viewport.width - margin
        or center.y < margin
        or center.y > viewport.height - margin
    )


def compute_indicator(
    center: Point2D,
    viewport: Resolution,
    margin: float,
    distance: float = DEFAULT_INDICATOR_DISTANCE,
) -> Optional[Indicator]:
    """Direction glyph pointing from the viewport center toward the creature.

    Returns None when the creature is comfortably inside the viewport, or
    when it sits exactly on the viewport center (no defined direction).

    Args:
        center: Rendered creature center
        viewport: Current viewport size
        margin: Edge margin (the creature size)
        distance: Radial distance of the glyph from the viewport center

    Returns:
        Indicator with angle ``atan2(dy, dx)`` and glyph position, or None
    """
    if not is_near_edge(center, viewport, margin):
        return None

    origin = viewport.center
    dx = center.x - origin.x
    dy = center.y - origin.y
    length = math.hypot(dx, dy)
    if length == 0.0:
        return None

    position = Point2D(
        x=origin.x + dx / length * distance,
        y=origin.y + dy / length * distance,
    )
    return Indicator(angle=math.atan2(dy, dx), position=position)
