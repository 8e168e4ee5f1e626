"""
Tap Event - a single tap on the overlay.

Uses Pydantic for validation and immutability.
"""
from pydantic import BaseModel, field_validator, ConfigDict

from goop.models import Point2D


class TapEvent(BaseModel):
    """Immutable tap from any source.

    Attributes:
        position: Where the tap landed (viewport coordinates)
        timestamp: Time of the tap (seconds, from the monotonic clock)

    Examples:
        >>> TapEvent(position=Point2D(x=10.0, y=20.0), timestamp=1.5)
        TapEvent(position=Point2D(x=10.0, y=20.0), timestamp=1.5)
    """
    position: Point2D
    timestamp: float

    @field_validator('timestamp')
    @classmethod
    def validate_timestamp(cls, v: float) -> float:
        """Validate timestamp is non-negative."""
        if v < 0:
            raise ValueError(f'Timestamp must be non-negative, got {v}')
        return v

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        """String representation for debugging."""
        return (f"TapEvent(pos=({self.position.x:.2f}, {self.position.y:.2f}), "
                f"t={self.timestamp:.3f})")
