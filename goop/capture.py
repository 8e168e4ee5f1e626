"""
Capture state machine for a single creature encounter.

States:
    IDLE -> spawn -> ACTIVE(n) -> tap... -> RESOLVED(CAPTURED | ESCAPED) -> reset -> IDLE

Taps outside the hit radius leave the encounter untouched. Taps inside it
draw one fresh catch roll: success captures, failure spends an attempt and
the creature escapes when none are left.

Examples:
    >>> machine = CaptureStateMachine(max_attempts=5)
    >>> machine.state
    <EncounterState.IDLE: 'idle'>
"""

import random
from typing import Optional

from goop.logging import get_logger
from goop.models import (
    CatchOutcome,
    CatchResult,
    Creature,
    Encounter,
    EncounterState,
    Point2D,
    TapOutcome,
    TapResult,
)
from goop.probability import catch_probability, roll_catch
from goop.targeting import (
    DEFAULT_BOUNCE_AMPLITUDE,
    DEFAULT_BOUNCE_PERIOD,
    DEFAULT_TAP_TOLERANCE,
    hit_test,
    rendered_center,
)

log = get_logger('capture')


class EncounterError(RuntimeError):
    """Raised for a transition that is illegal in the current state."""


class CaptureStateMachine:
    """Holds the active encounter and resolves taps against it.

    The machine owns the only Encounter record. Each transition replaces it
    with a new frozen instance, so anything holding a previous Encounter
    keeps a consistent snapshot.

    Attributes:
        max_attempts: Attempt budget given to each new encounter
        tap_tolerance: Hit radius as a fraction of the creature size

    Examples:
        >>> from goop.models import Creature, GoopType, Point2D
        >>> machine = CaptureStateMachine(max_attempts=3)
        >>> goop = Creature(id=1, name="Bloop", type=GoopType.WATER, rarity=1)
        >>> encounter = machine.spawn(goop, Point2D(x=200.0, y=400.0), creature_size=150.0)
        >>> encounter.attempts_remaining
        3
    """

    def __init__(
        self,
        max_attempts: int = 5,
        tap_tolerance: float = DEFAULT_TAP_TOLERANCE,
        bounce_amplitude: float = DEFAULT_BOUNCE_AMPLITUDE,
        bounce_period: float = DEFAULT_BOUNCE_PERIOD,
        rng: Optional[random.Random] = None,
    ):
        """Initialize an idle machine.

        Args:
            max_attempts: Attempt budget per encounter (>= 1)
            tap_tolerance: Hit radius as a fraction of the creature size
            bounce_amplitude: Bounce height used to find the rendered center
            bounce_period: Bounce half-cycle in seconds
            rng: Uniform source for catch rolls. Kept separate from the spawn
                scheduler's source.

        Raises:
            ValueError: If max_attempts is less than 1
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

        self.max_attempts = max_attempts
        self.tap_tolerance = tap_tolerance
        self.bounce_amplitude = bounce_amplitude
        self.bounce_period = bounce_period
        self._rng = rng or random.Random()

        self._state = EncounterState.IDLE
        self._encounter: Optional[Encounter] = None
        self._result: Optional[CatchResult] = None

    @property
    def state(self) -> EncounterState:
        """Current lifecycle state."""
        return self._state

    @property
    def encounter(self) -> Optional[Encounter]:
        """The current encounter (ACTIVE or RESOLVED), None when IDLE."""
        return self._encounter

    @property
    def result(self) -> Optional[CatchResult]:
        """Terminal result while RESOLVED, otherwise None."""
        return self._result

    @property
    def is_active(self) -> bool:
        """True while a creature is on screen and accepting taps."""
        return self._state == EncounterState.ACTIVE

    def spawn(
        self,
        creature: Creature,
        position: Point2D,
        creature_size: float,
        now: float = 0.0,
    ) -> Encounter:
        """Start a new encounter with a full attempt budget.

        Args:
            creature: Creature that appeared
            position: Nominal position in viewport coordinates
            creature_size: Visual size (hit radius reference)
            now: Monotonic spawn timestamp

        Returns:
            The new Encounter

        Raises:
            EncounterError: If an encounter already exists
        """
        if self._state != EncounterState.IDLE:
            raise EncounterError(
                f"Cannot spawn {creature.name}: machine is {self._state.value}"
            )

        self._encounter = Encounter(
            creature=creature,
            position=position,
            creature_size=creature_size,
            attempts_remaining=self.max_attempts,
            max_attempts=self.max_attempts,
            spawned_at=max(0.0, now),
        )
        self._result = None
        self._state = EncounterState.ACTIVE
        log.info("Wild %s appeared at %s (p=%.2f)",
                 creature.name, position, catch_probability(creature.rarity))
        return self._encounter

    def tap(
        self,
        point: Point2D,
        now: float,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> Optional[TapResult]:
        """Resolve a tap against the active creature.

        Args:
            point: Tap position in viewport coordinates
            now: Monotonic tap timestamp (locates the bounce)
            latitude: Player latitude, recorded if this tap resolves the encounter
            longitude: Player longitude, recorded if this tap resolves the encounter

        Returns:
            TapResult, or None when no encounter is ACTIVE (the tap is ignored)
        """
        if self._state != EncounterState.ACTIVE:
            log.debug("Ignoring tap at %s while %s", point, self._state.value)
            return None

        encounter = self._encounter
        center = rendered_center(encounter, now, self.bounce_amplitude, self.bounce_period)

        if not hit_test(point, center, encounter.creature_size, self.tap_tolerance):
            return TapResult(
                outcome=TapOutcome.MISS,
                attempts_remaining=encounter.attempts_remaining,
                rendered_center=center,
            )

        caught, draw = roll_catch(encounter.creature.rarity, self._rng)

        if caught:
            self._resolve(CatchOutcome.CAPTURED, now, latitude, longitude)
            return TapResult(
                outcome=TapOutcome.HIT_CAPTURE,
                attempts_remaining=encounter.attempts_remaining,
                draw=draw,
                resolution=CatchOutcome.CAPTURED,
                rendered_center=center,
            )

        remaining = encounter.attempts_remaining - 1
        self._encounter = encounter.model_copy(update={'attempts_remaining': remaining})
        log.debug("%s broke free (draw=%.3f), %d attempts left",
                  encounter.creature.name, draw, remaining)

        resolution = None
        if remaining == 0:
            self._resolve(CatchOutcome.ESCAPED, now, latitude, longitude)
            resolution = CatchOutcome.ESCAPED

        return TapResult(
            outcome=TapOutcome.HIT_MISS,
            attempts_remaining=remaining,
            draw=draw,
            resolution=resolution,
            rendered_center=center,
        )

    def _resolve(
        self,
        outcome: CatchOutcome,
        now: float,
        latitude: Optional[float],
        longitude: Optional[float],
    ) -> None:
        creature = self._encounter.creature
        self._result = CatchResult(
            creature_id=creature.id,
            creature_name=creature.name,
            outcome=outcome,
            latitude=latitude,
            longitude=longitude,
            resolved_at=now,
        )
        self._state = EncounterState.RESOLVED
        log.info("%s %s", creature.name, outcome.value)

    def reset(self) -> Optional[CatchResult]:
        """Return to IDLE after a resolution.

        Calling it while already IDLE is a no-op.

        Returns:
            The result that was cleared, if any

        Raises:
            EncounterError: If an encounter is still ACTIVE
        """
        if self._state == EncounterState.ACTIVE:
            raise EncounterError("Cannot reset while an encounter is active")

        result = self._result
        self._state = EncounterState.IDLE
        self._encounter = None
        self._result = None
        return result

    def clear(self) -> None:
        """Drop any encounter unconditionally (session teardown)."""
        self._state = EncounterState.IDLE
        self._encounter = None
        self._result = None
