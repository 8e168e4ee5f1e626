"""
Shared fixtures for the goop scan tests.

Provides deterministic stand-ins for everything the engine takes from the
outside world: uniform draws, the monotonic clock, the creature supply and
the catch recorder, plus a listener that records every session hook.
"""

import asyncio
from typing import List, Optional, Sequence

import pytest

from goop.collaborators import CatchRecorder, CreatureSupply
from goop.config import EncounterConfig
from goop.models import Creature, GoopType
from goop.session import SessionListener


class ScriptedRandom:
    """Uniform source that returns scripted draws, then repeats the last one."""

    def __init__(self, draws: Sequence[float]):
        self.draws = list(draws)
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        if len(self.draws) > 1:
            return self.draws.pop(0)
        return self.draws[0]


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


class StubSupply(CreatureSupply):
    """Creature supply returning a fixed creature (or None)."""

    def __init__(self, creature: Optional[Creature]):
        self.creature = creature
        self.calls = 0

    async def get_random_creature(self) -> Optional[Creature]:
        self.calls += 1
        await asyncio.sleep(0)
        return self.creature


class GatedSupply(CreatureSupply):
    """Creature supply that blocks until release() is called."""

    def __init__(self, creature: Creature):
        self.creature = creature
        self.calls = 0
        self._gate: Optional[asyncio.Event] = None

    @property
    def gate(self) -> asyncio.Event:
        # Created lazily so it binds to the running loop
        if self._gate is None:
            self._gate = asyncio.Event()
        return self._gate

    async def get_random_creature(self) -> Optional[Creature]:
        self.calls += 1
        await self.gate.wait()
        return self.creature

    def release(self) -> None:
        self.gate.set()


class RecordingRecorder(CatchRecorder):
    """Catch recorder that remembers calls and can be told to fail."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: List[tuple] = []

    async def record_catch(self, creature_id, latitude=None, longitude=None) -> None:
        self.calls.append((creature_id, latitude, longitude))
        if self.fail:
            raise IOError("storage unavailable")


class RecordingListener(SessionListener):
    """Session listener that records every hook as (name, payload)."""

    def __init__(self):
        self.events: List[tuple] = []

    def on_encounter_started(self, encounter):
        self.events.append(('started', encounter))

    def on_encounter_updated(self, attempts_remaining):
        self.events.append(('updated', attempts_remaining))

    def on_encounter_resolved(self, outcome, creature):
        self.events.append(('resolved', outcome))

    def on_indicator_update(self, indicator):
        self.events.append(('indicator', indicator))

    def on_indicator_hidden(self):
        self.events.append(('indicator_hidden', None))

    def on_feedback(self, cue):
        self.events.append(('feedback', cue.kind))

    def on_status(self, text):
        self.events.append(('status', text))

    def on_toast(self, text):
        self.events.append(('toast', text))

    def names(self) -> List[str]:
        return [name for name, _ in self.events]

    def payloads(self, name: str) -> list:
        return [payload for n, payload in self.events if n == name]


@pytest.fixture
def common_goop():
    """Rarity 1 creature (p = 0.70)."""
    return Creature(id=1, name="Bloop", type=GoopType.WATER, rarity=1)


@pytest.fixture
def rare_goop():
    """Rarity 3 creature (p = 0.40)."""
    return Creature(id=4, name="Magmush", type=GoopType.FIRE, rarity=3)


@pytest.fixture
def legendary_goop():
    """Rarity 5 creature (p = 0.15)."""
    return Creature(id=10, name="Umbraslime", type=GoopType.SHADOW, rarity=5)


@pytest.fixture
def no_bounce_config():
    """Default pacing with the bounce disabled."""
    return EncounterConfig(
        tick_interval=1.0,
        min_spawn_interval=3.0,
        spawn_chance=0.3,
        max_attempts=5,
        creature_size=150.0,
        bounce_amplitude=0.0,
    )
