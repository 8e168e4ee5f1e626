"""
Interfaces to the data layer the encounter engine talks to.

The engine only needs two things from storage: a random creature to spawn,
and somewhere to record a catch. Both calls are async because a real store
may block on I/O.

InMemoryCreatureRepository implements both for the demo app and tests.
"""

import random
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from goop.logging import get_logger
from goop.models import Creature

log = get_logger('repository')


class CreatureSupply(ABC):
    """Source of creatures to spawn.

    Subclasses must implement:
        - get_random_creature(): a creature, or None if there is none to give
    """

    @abstractmethod
    async def get_random_creature(self) -> Optional[Creature]:
        """Pick a creature to spawn.

        Returns:
            A creature, or None if the supply is empty
        """
        pass


class CatchRecorder(ABC):
    """Durable record of caught creatures.

    Subclasses must implement:
        - record_catch(creature_id, latitude, longitude)
    """

    @abstractmethod
    async def record_catch(
        self,
        creature_id: int,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> None:
        """Persist a catch. May raise; the caller treats failure as best effort."""
        pass


class CaughtCreature(BaseModel):
    """One row of the player's collection."""
    creature_id: int
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    experience: int = 0
    nickname: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class InMemoryCreatureRepository(CreatureSupply, CatchRecorder):
    """Creature catalog and player collection kept in memory.

    Attributes:
        caught: Caught creatures in catch order
        total_caught: Number of catches recorded

    Examples:
        >>> import asyncio
        >>> from goop.models import GoopType
        >>> repo = InMemoryCreatureRepository(
        ...     [Creature(id=1, name="Bloop", type=GoopType.WATER, rarity=1)])
        >>> asyncio.run(repo.get_random_creature()).name
        'Bloop'
    """

    def __init__(
        self,
        creatures: Sequence[Creature] = (),
        weights: Optional[Dict[int, float]] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the repository.

        Args:
            creatures: Catalog of spawnable creatures
            weights: Optional spawn weight per rarity tier. Creatures whose
                rarity has no weight get weight 1.0. None means uniform.
            rng: Random source for creature selection

        Raises:
            ValueError: If any weight is negative
        """
        if weights is not None:
            negative = {tier: w for tier, w in weights.items() if w < 0}
            if negative:
                raise ValueError(f"Spawn weights must not be negative: {negative}")

        self._creatures: List[Creature] = list(creatures)
        self._weights = weights
        self._rng = rng or random.Random()
        self.caught: List[CaughtCreature] = []
        self.total_caught = 0

    @property
    def creatures(self) -> List[Creature]:
        """The catalog, in load order."""
        return list(self._creatures)

    def get_creature(self, creature_id: int) -> Optional[Creature]:
        """Look up a catalog entry by id."""
        for creature in self._creatures:
            if creature.id == creature_id:
                return creature
        return None

    async def get_random_creature(self) -> Optional[Creature]:
        """Uniform (or rarity-weighted) choice from the catalog."""
        if not self._creatures:
            return None

        if self._weights is None:
            return self._rng.choice(self._creatures)

        weights = [self._weights.get(c.rarity, 1.0) for c in self._creatures]
        if sum(weights) <= 0:
            return None
        return self._rng.choices(self._creatures, weights=weights, k=1)[0]

    async def record_catch(
        self,
        creature_id: int,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> None:
        """Add the creature to the collection."""
        if self.get_creature(creature_id) is None:
            raise KeyError(f"Unknown creature id {creature_id}")

        self.caught.append(CaughtCreature(
            creature_id=creature_id,
            latitude=latitude,
            longitude=longitude,
        ))
        self.total_caught += 1
        log.debug("Recorded catch of creature %d (total %d)", creature_id, self.total_caught)
