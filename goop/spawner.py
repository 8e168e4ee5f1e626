"""
Goop scan - Spawn scheduler.

Decides, once per tick, whether a new creature should appear. A tick only
rolls the spawn chance when no encounter is active, no creature request is
already in flight, and enough time has passed since the last spawn (or the
end of the last encounter). A successful roll asks the creature supply for a
creature without blocking the tick loop; when the answer arrives the
scheduler re-checks that the session is still alive and still has no
encounter before handing the creature on.
"""
import asyncio
import random
import time
from typing import Callable, Optional, Set

from goop.capture import CaptureStateMachine
from goop.collaborators import CreatureSupply
from goop.config import EncounterConfig
from goop.logging import get_logger
from goop.models import Creature, EncounterState

log = get_logger('spawner')

# Timer wakeups may land slightly early
TICK_SLACK = 0.05


class SpawnClock:
    """Timestamps of the last spawn and the last spawn evaluation.

    Attributes:
        last_spawn_time: When a creature last appeared, or when the last
            encounter ended, whichever is later
        last_check_time: When the spawn chance was last evaluated
    """

    def __init__(self, now: float):
        self.last_spawn_time = now
        self.last_check_time: Optional[float] = None

    def since_spawn(self, now: float) -> float:
        """Seconds since the spawn reference point."""
        return now - self.last_spawn_time

    def since_check(self, now: float) -> Optional[float]:
        """Seconds since the last evaluation, None if never evaluated."""
        if self.last_check_time is None:
            return None
        return now - self.last_check_time

    def mark_check(self, now: float) -> None:
        self.last_check_time = now

    def mark_spawn(self, now: float) -> None:
        self.last_spawn_time = now

    def rearm(self, now: float) -> None:
        """Measure the next spawn from ``now`` (an encounter just ended)."""
        self.last_spawn_time = now


class SpawnScheduler:
    """Periodic spawn decisions for a scan session.

    The scheduler never spawns while the capture machine is ACTIVE, and
    never has more than one creature request in flight, so at most one
    encounter can exist at a time.

    Examples:
        >>> scheduler = SpawnScheduler(config, supply, machine, on_spawn=show)
        >>> scheduler.start()          # inside a running event loop
        >>> await scheduler.stop()
    """

    def __init__(
        self,
        config: EncounterConfig,
        supply: CreatureSupply,
        machine: CaptureStateMachine,
        on_spawn: Callable[[Creature], None],
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the scheduler.

        Args:
            config: Tick interval, spawn interval and spawn chance
            supply: Where creatures come from
            machine: Capture state machine (queried for an active encounter)
            on_spawn: Called with the creature once a spawn is confirmed
            rng: Uniform source for spawn rolls, separate from catch rolls
            clock: Monotonic time source
        """
        self.config = config
        self._supply = supply
        self._machine = machine
        self._on_spawn = on_spawn
        self._rng = rng or random.Random()
        self._clock = clock

        self.clock = SpawnClock(clock())
        self._pending = False
        self._closed = False
        self._task: Optional[asyncio.Task] = None
        self._ticks: Set[asyncio.Future] = set()

    @property
    def request_pending(self) -> bool:
        """True while a creature request is waiting on the supply."""
        return self._pending

    @property
    def closed(self) -> bool:
        return self._closed

    def _encounter_present(self) -> bool:
        return self._machine.state != EncounterState.IDLE

    def should_spawn(self, now: float) -> bool:
        """Evaluate one tick synchronously.

        Skips (without touching the clock) when an encounter exists, a
        request is pending, the session is closed, or the previous evaluation
        was less than one tick interval ago. Otherwise records the evaluation
        and rolls the spawn chance if the minimum spawn interval has elapsed.

        Args:
            now: Monotonic timestamp of the tick

        Returns:
            True if a creature should be requested
        """
        if self._closed or self._pending or self._encounter_present():
            return False

        since_check = self.clock.since_check(now)
        if since_check is not None and since_check < self.config.tick_interval - TICK_SLACK:
            return False
        self.clock.mark_check(now)

        if self.clock.since_spawn(now) < self.config.min_spawn_interval:
            return False

        roll = self._rng.random()
        log.trace("Spawn roll %.3f against %.2f", roll, self.config.spawn_chance)
        return roll < self.config.spawn_chance

    async def tick(self) -> Optional[Creature]:
        """Run one tick: decide, request a creature, and confirm the spawn.

        Returns:
            The spawned creature, or None if the tick did not spawn
        """
        if not self.should_spawn(self._clock()):
            return None

        self._pending = True
        try:
            creature = await self._supply.get_random_creature()
        finally:
            self._pending = False

        if creature is None:
            log.debug("Creature supply is empty, retrying next tick")
            return None

        # Time has passed during the request
        if self._closed:
            log.debug("Dropping %s: session closed", creature.name)
            return None
        if self._encounter_present():
            log.debug("Dropping %s: encounter already present", creature.name)
            return None

        self.clock.mark_spawn(self._clock())
        self._on_spawn(creature)
        return creature

    def rearm(self, now: Optional[float] = None) -> None:
        """Restart the spawn interval from now (an encounter ended)."""
        self.clock.rearm(self._clock() if now is None else now)

    async def run(self) -> None:
        """Tick forever at the configured interval until stopped.

        Each tick's supply request runs as its own task, so a slow supply
        never delays the next evaluation.
        """
        while not self._closed:
            if not self._pending:
                task = asyncio.ensure_future(self._guarded_tick())
                self._ticks.add(task)
                task.add_done_callback(self._ticks.discard)
            await asyncio.sleep(self.config.tick_interval)

    async def _guarded_tick(self) -> None:
        try:
            await self.tick()
        except Exception:
            log.exception("Spawn tick failed")

    def open(self) -> None:
        """Accept ticks again after stop(), whether or not the loop runs."""
        self._closed = False

    def start(self) -> asyncio.Task:
        """Start the periodic loop on the running event loop."""
        if self._task is None or self._task.done():
            self.open()
            self._task = asyncio.get_running_loop().create_task(self.run())
        return self._task

    async def stop(self) -> None:
        """Stop ticking and cancel the loop's in-flight ticks.

        Ticks awaited directly by the caller are not cancelled; their
        results are discarded when they finish.
        """
        self._closed = True
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        ticks = list(self._ticks)
        for tick in ticks:
            tick.cancel()
        if ticks:
            await asyncio.gather(*ticks, return_exceptions=True)
        self._ticks.clear()
