"""
Creature reference data.

Creatures are loaded once from the catalog and never mutated. Each one has a
type (which drives its colors and label) and a rarity tier (which drives its
catch probability).
"""

from enum import Enum, IntEnum
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict

from .primitives import Color


class GoopType(str, Enum):
    """Creature types with their display label and color pair.

    Attributes:
        WATER: Blue goop found near lakes and coasts
        FIRE: Red-orange goop
        NATURE: Green goop
        ELECTRIC: Yellow goop
        SHADOW: Purple goop
    """
    WATER = "water"
    FIRE = "fire"
    NATURE = "nature"
    ELECTRIC = "electric"
    SHADOW = "shadow"

    @property
    def display_name(self) -> str:
        """Label shown on the creature badge."""
        return _TYPE_LABELS[self]

    @property
    def primary_color(self) -> Color:
        """Body color."""
        return _TYPE_COLORS[self][0]

    @property
    def secondary_color(self) -> Color:
        """Glow and badge color."""
        return _TYPE_COLORS[self][1]


_TYPE_LABELS = {
    GoopType.WATER: "Water",
    GoopType.FIRE: "Fire",
    GoopType.NATURE: "Nature",
    GoopType.ELECTRIC: "Electric",
    GoopType.SHADOW: "Shadow",
}

_TYPE_COLORS = {
    GoopType.WATER: (Color(r=33, g=150, b=243), Color(r=144, g=202, b=249)),
    GoopType.FIRE: (Color(r=244, g=81, b=30), Color(r=255, g=171, b=64)),
    GoopType.NATURE: (Color(r=67, g=160, b=71), Color(r=165, g=214, b=167)),
    GoopType.ELECTRIC: (Color(r=253, g=216, b=53), Color(r=255, g=241, b=118)),
    GoopType.SHADOW: (Color(r=94, g=53, b=177), Color(r=179, g=157, b=219)),
}


class RarityTier(IntEnum):
    """Rarity tiers, 1 (most common) to 5 (rarest)."""
    COMMON = 1
    UNCOMMON = 2
    RARE = 3
    EPIC = 4
    LEGENDARY = 5

    @property
    def label(self) -> str:
        """Human readable tier name."""
        return self.name.capitalize()


def rarity_label(rarity: int) -> str:
    """Label for a raw rarity value, "Unknown" if it is not a known tier.

    Examples:
        >>> rarity_label(5)
        'Legendary'
        >>> rarity_label(9)
        'Unknown'
    """
    try:
        return RarityTier(rarity).label
    except ValueError:
        return "Unknown"


class Creature(BaseModel):
    """Immutable creature reference data.

    Rarity is kept as a raw integer: values outside 1-5 are tolerated and
    fall back to the default catch probability instead of failing to load.

    Attributes:
        id: Catalog identity (positive)
        name: Display name
        type: Creature type (colors and label)
        rarity: Rarity tier, normally 1-5
        experience_to_evolve: Experience needed to evolve (0 = final form)
        description: Optional flavor text
    """
    id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1)
    type: GoopType
    rarity: int
    experience_to_evolve: int = Field(default=0, ge=0)
    description: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def rarity_label(self) -> str:
        """Rarity tier label for this creature."""
        return rarity_label(self.rarity)

    def __str__(self) -> str:
        """String representation for debugging."""
        return f"Creature(#{self.id} {self.name}, {self.type.value}, rarity={self.rarity})"
