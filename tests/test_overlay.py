"""
Tests for the overlay renderer and cosmetic animations.

Tests cover:
- FeedbackAnimator lifecycle (play, update, expiry)
- Miss shake offsets
- Toast timing
- Smoke rendering onto an off-screen surface
"""

import os

os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')

import pygame
import pytest

from goop.models import (
    EncounterState,
    Encounter,
    FeedbackCue,
    FeedbackKind,
    FrameSnapshot,
    GoopType,
    Indicator,
    Point2D,
)
from goop.overlay import (
    CAPTURE_DURATION,
    ESCAPE_DURATION,
    MISS_SHAKE_AMPLITUDE,
    MISS_SHAKE_DURATION,
    TOAST_DURATION,
    FeedbackAnimator,
    OverlayRenderer,
)


def _cue(creature, kind):
    return FeedbackCue(kind=kind, creature=creature, position=Point2D(x=200.0, y=400.0))


class TestFeedbackAnimator:
    """Test animation timing."""

    def test_play_and_expire(self, common_goop):
        animator = FeedbackAnimator()
        animator.play(_cue(common_goop, FeedbackKind.CAPTURE), now=10.0)

        animator.update(10.0 + CAPTURE_DURATION / 2)
        assert len(animator.animations) == 1

        animator.update(10.0 + CAPTURE_DURATION)
        assert animator.animations == []

    def test_durations_per_kind(self, common_goop):
        animator = FeedbackAnimator()
        animator.play(_cue(common_goop, FeedbackKind.MISS), now=0.0)
        animator.play(_cue(common_goop, FeedbackKind.ESCAPE), now=0.0)

        animator.update(MISS_SHAKE_DURATION)

        assert [a.cue.kind for a in animator.animations] == [FeedbackKind.ESCAPE]
        assert animator.animations[0].duration == ESCAPE_DURATION

    def test_shake_offset(self, common_goop):
        animator = FeedbackAnimator()
        animator.play(_cue(common_goop, FeedbackKind.MISS), now=0.0)

        assert animator.shake_offset(0.0) == 0.0
        assert animator.shake_offset(MISS_SHAKE_DURATION / 3) == pytest.approx(MISS_SHAKE_AMPLITUDE)
        assert animator.shake_offset(MISS_SHAKE_DURATION * 2 / 3) == pytest.approx(-MISS_SHAKE_AMPLITUDE)
        assert animator.shake_offset(MISS_SHAKE_DURATION) == pytest.approx(0.0)

    def test_departing_excludes_misses(self, common_goop):
        animator = FeedbackAnimator()
        animator.play(_cue(common_goop, FeedbackKind.MISS), now=0.0)
        animator.play(_cue(common_goop, FeedbackKind.CAPTURE), now=0.0)

        assert [a.cue.kind for a in animator.departing()] == [FeedbackKind.CAPTURE]

    def test_toast_expires(self):
        animator = FeedbackAnimator()
        animator.show_toast("Bloop caught!", now=1.0)

        animator.update(1.0 + TOAST_DURATION / 2)
        assert animator.toast == "Bloop caught!"

        animator.update(1.0 + TOAST_DURATION)
        assert animator.toast is None

    def test_clear(self, common_goop):
        animator = FeedbackAnimator()
        animator.play(_cue(common_goop, FeedbackKind.ESCAPE), now=0.0)
        animator.show_toast("hi", now=0.0)
        animator.clear()
        assert animator.animations == []
        assert animator.toast is None


class TestOverlayRenderer:
    """Smoke tests drawing onto an off-screen surface."""

    @pytest.fixture
    def screen(self):
        pygame.font.init()
        yield pygame.Surface((400, 800))
        pygame.font.quit()

    def test_scanning_frame(self, screen):
        renderer = OverlayRenderer()
        renderer.habitat = GoopType.FIRE
        renderer.render(screen, FrameSnapshot(state=EncounterState.IDLE, status_text="Scanning..."), now=1.0)

    def test_creature_drawn_at_center(self, screen, common_goop):
        encounter = Encounter(
            creature=common_goop,
            position=Point2D(x=200.0, y=400.0),
            creature_size=150.0,
            attempts_remaining=5,
            max_attempts=5,
        )
        snapshot = FrameSnapshot(
            state=EncounterState.ACTIVE,
            encounter=encounter,
            rendered_center=Point2D(x=200.0, y=400.0),
            indicator=Indicator(angle=0.0, position=Point2D(x=300.0, y=400.0)),
            status_text="Tap to catch! (70%) - 5 attempts left",
        )

        OverlayRenderer(creature_size=150.0).render(screen, snapshot, now=0.0)

        assert tuple(screen.get_at((200, 400)))[:3] == GoopType.WATER.primary_color.as_rgb_tuple

    def test_departing_animations(self, screen, common_goop):
        renderer = OverlayRenderer()
        renderer.animator.play(_cue(common_goop, FeedbackKind.CAPTURE), now=0.0)
        renderer.animator.play(_cue(common_goop, FeedbackKind.ESCAPE), now=0.0)
        renderer.animator.show_toast("Bloop caught!", now=0.0)

        for t in (0.1, 0.4, 0.55):
            renderer.render(screen, FrameSnapshot(state=EncounterState.IDLE), now=t)

        assert renderer.animator.departing()[0].cue.kind == FeedbackKind.ESCAPE
