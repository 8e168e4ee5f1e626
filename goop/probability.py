"""
Catch probability by rarity tier.

This table is the only place catch rates are defined. The percentage shown
to the player is always derived from it.

Examples:
    >>> catch_probability(3)
    0.4
    >>> catch_percent(3)
    40
    >>> catch_probability(42)
    0.5
"""

import random
from typing import Dict, Optional, Tuple

from goop.models import RarityTier

CATCH_PROBABILITIES: Dict[int, float] = {
    RarityTier.COMMON: 0.70,
    RarityTier.UNCOMMON: 0.55,
    RarityTier.RARE: 0.40,
    RarityTier.EPIC: 0.25,
    RarityTier.LEGENDARY: 0.15,
}

DEFAULT_CATCH_PROBABILITY = 0.50


def catch_probability(rarity: int) -> float:
    """Probability in [0, 1] that a landed tap catches a creature of this rarity.

    Unrecognized rarities use DEFAULT_CATCH_PROBABILITY.
    """
    return CATCH_PROBABILITIES.get(rarity, DEFAULT_CATCH_PROBABILITY)


def catch_percent(rarity: int) -> int:
    """Catch probability as the whole percentage shown to the player."""
    return round(catch_probability(rarity) * 100)


def roll_catch(rarity: int, rng: Optional[random.Random] = None) -> Tuple[bool, float]:
    """Draw one catch trial.

    Args:
        rarity: Rarity tier of the creature
        rng: Uniform source with a ``random()`` method (default: module RNG)

    Returns:
        (success, draw) where success is ``draw < catch_probability(rarity)``
    """
    draw = (rng or random).random()
    return draw < catch_probability(rarity), draw
