"""
Scan Session Controller

Composition root for one scanning session. It wires scheduler ticks, tap
input and per-frame geometry to the capture state machine, reports what
happened to the host through a SessionListener, and hands captures to the
catch recorder.

All engine state is touched from the asyncio event loop only. Taps coming
from another thread must go through post_tap_threadsafe(), which marshals
them onto the loop.

Usage:
    controller = SessionController(config, repo, repo, Resolution(width=720, height=1280),
                                   listener=overlay_listener)
    controller.start()                 # inside a running event loop

    # Game loop
    while running:
        for event in tap_source.poll_events():
            controller.handle_tap(event)
        snapshot = controller.update_frame()
        renderer.render(screen, snapshot)
        await asyncio.sleep(0)

    await controller.shutdown()
"""

import asyncio
import random
import time
from typing import Callable, Optional, Set

from goop.capture import CaptureStateMachine
from goop.collaborators import CatchRecorder, CreatureSupply
from goop.config import EncounterConfig
from goop.habitat import detect_habitat
from goop.input import TapEvent
from goop.logging import emit_record, get_logger
from goop.models import (
    CatchOutcome,
    CatchResult,
    Creature,
    Encounter,
    EncounterState,
    FeedbackCue,
    FeedbackKind,
    FrameSnapshot,
    GoopType,
    Indicator,
    Point2D,
    Resolution,
    TapOutcome,
    TapResult,
)
from goop.probability import catch_percent
from goop.spawner import SpawnScheduler
from goop.targeting import compute_indicator, place_creature, rendered_center

log = get_logger('session')

SCANNING_TEXT = "Scanning..."


def catch_status_text(creature: Creature, attempts_remaining: int) -> str:
    """Status bar text while a creature is on screen."""
    return (f"Tap to catch! ({catch_percent(creature.rarity)}%) - "
            f"{attempts_remaining} attempts left")


def miss_text(attempts_remaining: int) -> str:
    return f"Missed! {attempts_remaining} attempts left"


def resolution_text(outcome: CatchOutcome, creature: Creature) -> str:
    if outcome == CatchOutcome.CAPTURED:
        return f"{creature.name} caught!"
    return f"{creature.name} escaped!"


class SessionListener:
    """Hooks the host overrides to follow the session.

    Every hook is a no-op by default, so hosts only implement what they show.
    """

    def on_encounter_started(self, encounter: Encounter) -> None:
        """A creature appeared."""

    def on_encounter_updated(self, attempts_remaining: int) -> None:
        """A landed tap failed to catch; attempts were spent."""

    def on_encounter_resolved(self, outcome: CatchOutcome, creature: Creature) -> None:
        """The creature was captured or escaped."""

    def on_indicator_update(self, indicator: Indicator) -> None:
        """The creature is near or past an edge this frame."""

    def on_indicator_hidden(self) -> None:
        """The creature is comfortably on screen again (or gone)."""

    def on_feedback(self, cue: FeedbackCue) -> None:
        """A cosmetic animation should play."""

    def on_status(self, text: str) -> None:
        """The status bar text changed."""

    def on_toast(self, text: str) -> None:
        """A short transient message should be shown."""


class SessionController:
    """Runs one scan session: spawns, taps, resolutions and frame geometry.

    Attributes:
        config: Encounter tunables
        machine: The capture state machine (single source of encounter state)
        scheduler: The spawn scheduler
        viewport: Current viewport size
        latitude: Last known player latitude
        longitude: Last known player longitude
    """

    def __init__(
        self,
        config: EncounterConfig,
        supply: CreatureSupply,
        recorder: CatchRecorder,
        viewport: Resolution,
        listener: Optional[SessionListener] = None,
        placement: Callable[[Resolution, random.Random], Point2D] = place_creature,
        catch_rng: Optional[random.Random] = None,
        spawn_rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the session. Nothing runs until start().

        Args:
            config: Encounter tunables
            supply: Creature supply for spawns
            recorder: Where captures are persisted
            viewport: Viewport size at session start
            listener: Host hooks (default: no-op listener)
            placement: Chooses the spawn position for a new creature
            catch_rng: Uniform source for catch rolls
            spawn_rng: Uniform source for spawn rolls and placement
            clock: Monotonic time source shared by the scheduler
        """
        self.config = config
        self.viewport = viewport
        self._recorder = recorder
        self._listener = listener or SessionListener()
        self._placement = placement
        self._clock = clock
        self._placement_rng = spawn_rng or random.Random()

        self.machine = CaptureStateMachine(
            max_attempts=config.max_attempts,
            tap_tolerance=config.tap_tolerance,
            bounce_amplitude=config.bounce_amplitude,
            bounce_period=config.bounce_period,
            rng=catch_rng,
        )
        self.scheduler = SpawnScheduler(
            config,
            supply,
            self.machine,
            on_spawn=self._begin_encounter,
            rng=spawn_rng,
            clock=clock,
        )

        self.latitude: Optional[float] = None
        self.longitude: Optional[float] = None
        self.habitat: Optional[GoopType] = None

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._alive = False
        self._status = SCANNING_TEXT
        self._indicator_visible = False
        self._persist_tasks: Set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def alive(self) -> bool:
        return self._alive

    @property
    def state(self) -> EncounterState:
        return self.machine.state

    @property
    def status_text(self) -> str:
        return self._status

    def start(self, run_scheduler: bool = True) -> None:
        """Start the session on the running event loop.

        Args:
            run_scheduler: Start the periodic spawn loop. Hosts that drive
                ticks themselves (e.g. from camera frames) pass False and call
                ``scheduler.tick()``.
        """
        self._loop = asyncio.get_running_loop()
        self._alive = True
        self.scheduler.open()
        self.scheduler.rearm()
        if run_scheduler:
            self.scheduler.start()
        self._set_status(SCANNING_TEXT)
        log.info("Scan session started (%s)", self.viewport)

    async def shutdown(self) -> None:
        """Stop spawning and drop the current encounter.

        Creature requests still in flight are discarded when they complete.
        Catch persistence already started is left to finish.
        """
        if not self._alive:
            return
        self._alive = False
        await self.scheduler.stop()
        self.machine.clear()
        self._indicator_visible = False
        log.info("Scan session stopped")

    async def drain(self) -> None:
        """Wait for pending catch persistence to finish."""
        while self._persist_tasks:
            await asyncio.gather(*list(self._persist_tasks), return_exceptions=True)

    # ------------------------------------------------------------------
    # Host inputs
    # ------------------------------------------------------------------

    def resize(self, width: int, height: int) -> None:
        """Viewport changed size; geometry uses it from the next frame."""
        self.viewport = Resolution(width=width, height=height)

    def set_location(self, latitude: float, longitude: float) -> GoopType:
        """Update the player location and the habitat derived from it."""
        self.latitude = latitude
        self.longitude = longitude
        self.habitat = detect_habitat(latitude, longitude)
        return self.habitat

    def post_tap_threadsafe(self, event: TapEvent) -> None:
        """Queue a tap from another thread onto the session's event loop."""
        if self._loop is None or not self._alive:
            return
        self._loop.call_soon_threadsafe(self.handle_tap, event)

    def handle_tap(self, event: TapEvent) -> Optional[TapResult]:
        """Resolve a tap against the active creature.

        Taps while no creature is on screen are ignored.

        Returns:
            The TapResult, or None if the tap was ignored
        """
        if not self._alive:
            return None

        encounter = self.machine.encounter
        result = self.machine.tap(
            event.position,
            event.timestamp,
            latitude=self.latitude,
            longitude=self.longitude,
        )
        if result is None or result.outcome == TapOutcome.MISS:
            return result

        if result.resolution is None:
            self._listener.on_encounter_updated(result.attempts_remaining)
            self._listener.on_feedback(FeedbackCue(
                kind=FeedbackKind.MISS,
                creature=encounter.creature,
                position=result.rendered_center,
            ))
            self._listener.on_toast(miss_text(result.attempts_remaining))
            self._set_status(catch_status_text(encounter.creature, result.attempts_remaining))
            return result

        self._finish_encounter(encounter.creature, result)
        return result

    # ------------------------------------------------------------------
    # Frame geometry
    # ------------------------------------------------------------------

    def update_frame(self, now: Optional[float] = None) -> FrameSnapshot:
        """Recompute the rendered center and off-screen indicator.

        Call once per rendered frame. Fires on_indicator_update every frame
        the creature is near an edge and on_indicator_hidden once when it
        stops being so.

        Returns:
            Read-only snapshot for the renderer
        """
        now = self._clock() if now is None else now
        encounter = self.machine.encounter

        center = None
        indicator = None
        if self.machine.is_active:
            center = rendered_center(
                encounter, now, self.config.bounce_amplitude, self.config.bounce_period
            )
            indicator = compute_indicator(
                center,
                self.viewport,
                margin=encounter.creature_size,
                distance=self.config.indicator_distance,
            )

        if indicator is not None:
            self._indicator_visible = True
            self._listener.on_indicator_update(indicator)
        else:
            self._hide_indicator()

        return FrameSnapshot(
            state=self.machine.state,
            encounter=encounter,
            rendered_center=center,
            indicator=indicator,
            status_text=self._status,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _begin_encounter(self, creature: Creature) -> None:
        if not self._alive:
            return

        position = self._placement(self.viewport, self._placement_rng)
        encounter = self.machine.spawn(
            creature,
            position,
            creature_size=self.config.creature_size,
            now=self._clock(),
        )
        emit_record('encounters', {
            'type': 'spawned',
            'creature_id': creature.id,
            'x': position.x,
            'y': position.y,
        })
        self._listener.on_encounter_started(encounter)
        self._set_status(catch_status_text(creature, encounter.attempts_remaining))

    def _finish_encounter(self, creature: Creature, result: TapResult) -> None:
        catch = self.machine.result

        if result.resolution == CatchOutcome.CAPTURED:
            # Persistence does not wait for the capture animation
            self._persist(catch)
            kind = FeedbackKind.CAPTURE
        else:
            kind = FeedbackKind.ESCAPE

        emit_record('encounters', {
            'type': result.resolution.value,
            'creature_id': creature.id,
            'attempts_remaining': result.attempts_remaining,
        })

        try:
            self._listener.on_feedback(FeedbackCue(
                kind=kind, creature=creature, position=result.rendered_center,
            ))
            self._listener.on_encounter_resolved(result.resolution, creature)
            self._listener.on_toast(resolution_text(result.resolution, creature))
        finally:
            # A failing host hook must not leave the machine RESOLVED
            self.machine.reset()
            self.scheduler.rearm()
            self._hide_indicator()
            self._set_status(SCANNING_TEXT)

    def _persist(self, catch: CatchResult) -> None:
        task = self._loop.create_task(self._record_catch(catch))
        self._persist_tasks.add(task)
        task.add_done_callback(self._persist_tasks.discard)

    async def _record_catch(self, catch: CatchResult) -> None:
        try:
            await self._recorder.record_catch(
                catch.creature_id,
                latitude=catch.latitude,
                longitude=catch.longitude,
            )
        except Exception as e:
            log.exception("Failed to record catch of %s", catch.creature_name)
            emit_record('catches', {
                'type': 'persist_failed',
                'creature_id': catch.creature_id,
                'error': repr(e),
            })
            return

        emit_record('catches', {
            'type': 'persisted',
            'creature_id': catch.creature_id,
            'latitude': catch.latitude,
            'longitude': catch.longitude,
        })

    def _hide_indicator(self) -> None:
        if self._indicator_visible:
            self._indicator_visible = False
            self._listener.on_indicator_hidden()

    def _set_status(self, text: str) -> None:
        if text != self._status:
            self._status = text
            self._listener.on_status(text)
