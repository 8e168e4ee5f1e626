"""
Data models for the goop scan overlay.

This package provides all Pydantic data models used across the system:
- Primitives: Point2D, Resolution, Color
- Creature: GoopType, RarityTier, Creature
- Encounter: encounter state, tap and catch results, indicator and feedback

Usage:
    >>> from goop.models import Point2D, Resolution, Creature, GoopType
    >>> from goop.models.encounter import EncounterState
"""

from .primitives import (
    Point2D,
    Resolution,
    Color,
)

from .creature import (
    GoopType,
    RarityTier,
    Creature,
    rarity_label,
)

from .encounter import (
    EncounterState,
    TapOutcome,
    CatchOutcome,
    Encounter,
    TapResult,
    CatchResult,
    Indicator,
    FeedbackKind,
    FeedbackCue,
    FrameSnapshot,
)

__all__ = [
    # Primitives
    "Point2D",
    "Resolution",
    "Color",
    # Creature
    "GoopType",
    "RarityTier",
    "Creature",
    "rarity_label",
    # Encounter
    "EncounterState",
    "TapOutcome",
    "CatchOutcome",
    "Encounter",
    "TapResult",
    "CatchResult",
    "Indicator",
    "FeedbackKind",
    "FeedbackCue",
    "FrameSnapshot",
]
