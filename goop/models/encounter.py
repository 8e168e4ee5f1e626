"""
Encounter-related data models.

An Encounter is the single creature currently on screen. It is a frozen
record: every transition of the capture state machine replaces it with a
new instance, and the rendering layer only ever reads it.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict, model_validator

from .creature import Creature
from .primitives import Point2D


class EncounterState(str, Enum):
    """Lifecycle states of the capture state machine.

    Attributes:
        IDLE: No creature on screen, scanning
        ACTIVE: A creature is on screen and accepts taps
        RESOLVED: The creature was captured or escaped, awaiting reset
    """
    IDLE = "idle"
    ACTIVE = "active"
    RESOLVED = "resolved"


class TapOutcome(str, Enum):
    """Result of a single tap against the active creature.

    Attributes:
        HIT_CAPTURE: Tap landed and the catch roll succeeded
        HIT_MISS: Tap landed but the creature broke free
        MISS: Tap was outside the hit radius (no attempt consumed)
    """
    HIT_CAPTURE = "hit_capture"
    HIT_MISS = "hit_miss"
    MISS = "miss"


class CatchOutcome(str, Enum):
    """Terminal outcome of an encounter."""
    CAPTURED = "captured"
    ESCAPED = "escaped"


class Encounter(BaseModel):
    """The active creature appearance and its remaining attempt budget.

    Attributes:
        creature: The creature being encountered
        position: Nominal position in viewport coordinates
        creature_size: Visual size used for hit radius and edge margin
        attempts_remaining: Catch attempts left before it escapes
        max_attempts: Attempt budget the encounter started with
        spawned_at: Monotonic timestamp of the spawn (drives the bounce)
    """
    creature: Creature
    position: Point2D
    creature_size: float = Field(..., gt=0)
    attempts_remaining: int = Field(..., ge=0)
    max_attempts: int = Field(..., ge=1)
    spawned_at: float = Field(default=0.0, ge=0)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode='after')
    def validate_attempts(self) -> 'Encounter':
        """Attempts remaining can never exceed the budget."""
        if self.attempts_remaining > self.max_attempts:
            raise ValueError(
                f"attempts_remaining ({self.attempts_remaining}) exceeds "
                f"max_attempts ({self.max_attempts})"
            )
        return self

    def __str__(self) -> str:
        """String representation for debugging."""
        return (f"Encounter({self.creature.name}, pos={self.position}, "
                f"attempts={self.attempts_remaining}/{self.max_attempts})")


class TapResult(BaseModel):
    """What a tap did to the active encounter.

    Attributes:
        outcome: Hit/miss classification of the tap
        attempts_remaining: Attempts left after the tap
        draw: Uniform draw used for the catch roll (None for a MISS)
        resolution: Terminal outcome if the tap ended the encounter
        rendered_center: Creature center the tap was tested against
    """
    outcome: TapOutcome
    attempts_remaining: int = Field(..., ge=0)
    draw: Optional[float] = None
    resolution: Optional[CatchOutcome] = None
    rendered_center: Point2D

    model_config = ConfigDict(frozen=True)


class CatchResult(BaseModel):
    """Terminal outcome of an encounter, handed to persistence.

    Attributes:
        creature_id: Catalog id of the creature
        creature_name: Display name (for status text)
        outcome: CAPTURED or ESCAPED
        latitude: Player latitude when it resolved, if known
        longitude: Player longitude when it resolved, if known
        resolved_at: Monotonic timestamp of the resolution
    """
    creature_id: int
    creature_name: str
    outcome: CatchOutcome
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    resolved_at: float = 0.0

    model_config = ConfigDict(frozen=True)


class Indicator(BaseModel):
    """Off-screen direction glyph for the current frame.

    Attributes:
        angle: Orientation in radians, atan2(dy, dx) from viewport center
        position: Where to draw the glyph
    """
    angle: float
    position: Point2D

    model_config = ConfigDict(frozen=True)


class FeedbackKind(str, Enum):
    """Cosmetic feedback the renderer may animate."""
    MISS = "miss"
    CAPTURE = "capture"
    ESCAPE = "escape"


class FeedbackCue(BaseModel):
    """Notification that a cosmetic animation should play.

    The engine never waits for it; the renderer decides timing.
    """
    kind: FeedbackKind
    creature: Creature
    position: Point2D

    model_config = ConfigDict(frozen=True)


class FrameSnapshot(BaseModel):
    """Read-only view of the session for one rendered frame."""
    state: EncounterState
    encounter: Optional[Encounter] = None
    rendered_center: Optional[Point2D] = None
    indicator: Optional[Indicator] = None
    status_text: str = ""

    model_config = ConfigDict(frozen=True)
