"""
Tests for the creature supply and catch recorder interfaces.
"""

import asyncio
import random

import pytest

from goop.collaborators import CatchRecorder, CreatureSupply, InMemoryCreatureRepository
from goop.models import Creature, GoopType


@pytest.fixture
def catalog():
    return [
        Creature(id=1, name="Bloop", type=GoopType.WATER, rarity=1),
        Creature(id=2, name="Cindra", type=GoopType.FIRE, rarity=3),
        Creature(id=3, name="Umbra", type=GoopType.SHADOW, rarity=5),
    ]


class TestInterfaces:
    """Test the abstract interfaces."""

    def test_supply_is_abstract(self):
        with pytest.raises(TypeError):
            CreatureSupply()  # type: ignore

    def test_recorder_is_abstract(self):
        with pytest.raises(TypeError):
            CatchRecorder()  # type: ignore

    def test_repository_implements_both(self, catalog):
        repo = InMemoryCreatureRepository(catalog)
        assert isinstance(repo, CreatureSupply)
        assert isinstance(repo, CatchRecorder)


class TestRandomCreature:
    """Test creature selection."""

    def test_empty_catalog_returns_none(self):
        repo = InMemoryCreatureRepository()
        assert asyncio.run(repo.get_random_creature()) is None

    def test_uniform_choice_from_catalog(self, catalog):
        repo = InMemoryCreatureRepository(catalog, rng=random.Random(3))
        picks = {asyncio.run(repo.get_random_creature()).id for _ in range(60)}
        assert picks == {1, 2, 3}

    def test_weighted_choice(self, catalog):
        repo = InMemoryCreatureRepository(
            catalog, weights={1: 1.0, 3: 0.0, 5: 0.0}, rng=random.Random(3),
        )
        picks = {asyncio.run(repo.get_random_creature()).id for _ in range(30)}
        assert picks == {1}

    def test_zero_weights_return_none(self, catalog):
        repo = InMemoryCreatureRepository(catalog, weights={1: 0.0, 3: 0.0, 5: 0.0})
        assert asyncio.run(repo.get_random_creature()) is None

    def test_negative_weight_rejected(self, catalog):
        with pytest.raises(ValueError, match="negative"):
            InMemoryCreatureRepository(catalog, weights={1: 1.0, 3: -0.5})

    def test_lookup(self, catalog):
        repo = InMemoryCreatureRepository(catalog)
        assert repo.get_creature(2).name == "Cindra"
        assert repo.get_creature(99) is None
        assert repo.creatures == catalog


class TestRecordCatch:
    """Test catch persistence."""

    def test_records_catch(self, catalog):
        repo = InMemoryCreatureRepository(catalog)
        asyncio.run(repo.record_catch(2, latitude=1.0, longitude=2.0))

        assert repo.total_caught == 1
        assert repo.caught[0].creature_id == 2
        assert repo.caught[0].latitude == 1.0
        assert repo.caught[0].longitude == 2.0

    def test_duplicates_allowed(self, catalog):
        repo = InMemoryCreatureRepository(catalog)
        asyncio.run(repo.record_catch(1))
        asyncio.run(repo.record_catch(1))
        assert repo.total_caught == 2

    def test_unknown_creature(self, catalog):
        repo = InMemoryCreatureRepository(catalog)
        with pytest.raises(KeyError):
            asyncio.run(repo.record_catch(42))
        assert repo.total_caught == 0
