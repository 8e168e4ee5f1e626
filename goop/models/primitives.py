"""
Geometry and color values shared by targeting, the overlay and input.

Viewport coordinates put the origin at the top-left corner with y growing
downwards, matching pygame surfaces.
"""

from pydantic import BaseModel, Field, field_validator, computed_field, ConfigDict
from typing import Tuple


class Point2D(BaseModel):
    """A position or offset on the viewport, in pixels.

    Examples:
        >>> tap = Point2D(x=100.0, y=200.0)
        >>> tap.distance_to(Point2D(x=103.0, y=204.0))
        5.0
    """
    model_config = ConfigDict(frozen=True)

    x: float
    y: float

    def distance_to(self, other: 'Point2D') -> float:
        return ((self.x - other.x) ** 2 + (self.y - other.y) ** 2) ** 0.5

    def __str__(self) -> str:
        return f"({self.x:.1f}, {self.y:.1f})"


class Resolution(BaseModel):
    """Current viewport size. Replaced wholesale on resize.

    Examples:
        >>> Resolution(width=1000, height=2000).center
        Point2D(x=500.0, y=1000.0)
    """
    model_config = ConfigDict(frozen=True)

    width: int = Field(..., gt=0, description="Viewport width in pixels")
    height: int = Field(..., gt=0, description="Viewport height in pixels")

    @computed_field
    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    @property
    def center(self) -> Point2D:
        """Viewport midpoint; off-screen indicators are aimed from here."""
        return Point2D(x=self.width / 2, y=self.height / 2)

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


class Color(BaseModel):
    """8-bit RGBA color used for type palettes and overlay text."""
    model_config = ConfigDict(frozen=True)

    r: int
    g: int
    b: int
    a: int = 255

    @field_validator('r', 'g', 'b', 'a')
    @classmethod
    def _in_byte_range(cls, value: int) -> int:
        if value < 0 or value > 255:
            raise ValueError(f'expected a channel value between 0 and 255, got {value}')
        return value

    @property
    def as_tuple(self) -> Tuple[int, int, int, int]:
        """Channels as an (r, g, b, a) tuple, the form pygame drawing calls take."""
        return (self.r, self.g, self.b, self.a)

    @property
    def as_rgb_tuple(self) -> Tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def with_alpha(self, a: int) -> 'Color':
        """Same color at another opacity."""
        return Color(**{**self.model_dump(), 'a': a})
