"""
Scan overlay rendering.

Draws a FrameSnapshot with pygame: the scanning backdrop, the wobbling goop
with its glow, eyes and type badge, the off-screen arrow and the status bar.
The renderer never changes session state; cosmetic animations (miss shake,
capture shrink, escape fade) are timed here from FeedbackCues.

Classes:
    FeedbackAnimator: Tracks running cosmetic animations
    OverlayRenderer: Draws one frame
"""

import math
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

import pygame

from goop.models import (
    Creature,
    FeedbackCue,
    FeedbackKind,
    FrameSnapshot,
    GoopType,
    Indicator,
    Point2D,
)

BACKGROUND_COLOR = (18, 22, 30)
GRID_COLOR = (32, 40, 52)
TEXT_COLOR = (255, 255, 255)
STATUS_BAR_COLOR = (0, 0, 0, 150)
INDICATOR_COLOR = (255, 255, 255)

# Animation durations (seconds)
MISS_SHAKE_DURATION = 0.15
ESCAPE_DURATION = 0.6
CAPTURE_DURATION = 0.5
TOAST_DURATION = 1.5

MISS_SHAKE_AMPLITUDE = 15.0
ESCAPE_SHAKE_AMPLITUDE = 25.0

WOBBLE_POINTS = 12
WOBBLE_AMOUNT = 15.0


@dataclass
class Animation:
    """A running cosmetic animation."""
    cue: FeedbackCue
    started_at: float
    duration: float

    def progress(self, now: float) -> float:
        """0.0 at start, 1.0 when finished."""
        return min(1.0, max(0.0, (now - self.started_at) / self.duration))

    def finished(self, now: float) -> bool:
        return now - self.started_at >= self.duration


class FeedbackAnimator:
    """Times miss/capture/escape animations and transient toasts.

    Attributes:
        animations: Running animations, oldest first
        toast: Current toast text, if any
    """

    _DURATIONS = {
        FeedbackKind.MISS: MISS_SHAKE_DURATION,
        FeedbackKind.CAPTURE: CAPTURE_DURATION,
        FeedbackKind.ESCAPE: ESCAPE_DURATION,
    }

    def __init__(self):
        self.animations: List[Animation] = []
        self.toast: Optional[str] = None
        self._toast_until = 0.0

    def play(self, cue: FeedbackCue, now: float) -> None:
        self.animations.append(Animation(cue, now, self._DURATIONS[cue.kind]))

    def show_toast(self, text: str, now: float) -> None:
        self.toast = text
        self._toast_until = now + TOAST_DURATION

    def update(self, now: float) -> None:
        """Drop finished animations and expired toasts."""
        self.animations = [a for a in self.animations if not a.finished(now)]
        if self.toast is not None and now >= self._toast_until:
            self.toast = None

    def shake_offset(self, now: float) -> float:
        """Horizontal shake of the live creature from running miss animations."""
        offset = 0.0
        for anim in self.animations:
            if anim.cue.kind == FeedbackKind.MISS:
                # 0 -> +A -> -A -> 0
                offset += _triangle_shake(anim.progress(now), MISS_SHAKE_AMPLITUDE)
        return offset

    def departing(self) -> List[Animation]:
        """Capture and escape animations (the creature is already gone)."""
        return [a for a in self.animations if a.cue.kind != FeedbackKind.MISS]

    def clear(self) -> None:
        self.animations.clear()
        self.toast = None


def _triangle_shake(progress: float, amplitude: float) -> float:
    """Piecewise linear 0 -> +A -> -A -> 0 over progress 0..1."""
    if progress < 1 / 3:
        return amplitude * progress * 3
    if progress < 2 / 3:
        return amplitude * (1 - (progress - 1 / 3) * 6)
    return -amplitude * (1 - (progress - 2 / 3) * 3)


class OverlayRenderer:
    """Draws the scan overlay for a FrameSnapshot.

    Examples:
        >>> renderer = OverlayRenderer(creature_size=150.0)
        >>> renderer.render(screen, controller.update_frame())
    """

    def __init__(self, creature_size: float = 150.0, animator: Optional[FeedbackAnimator] = None):
        self.creature_size = creature_size
        self.animator = animator or FeedbackAnimator()
        self.habitat: Optional[GoopType] = None
        self._font: Optional[pygame.font.Font] = None
        self._small_font: Optional[pygame.font.Font] = None

    def _fonts(self) -> Tuple[pygame.font.Font, pygame.font.Font]:
        if self._font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            self._font = pygame.font.Font(None, 42)
            self._small_font = pygame.font.Font(None, 30)
        return self._font, self._small_font

    def render(self, screen: pygame.Surface, snapshot: FrameSnapshot, now: Optional[float] = None) -> None:
        """Draw one frame.

        Args:
            screen: Target surface
            snapshot: Session state for this frame
            now: Monotonic time (default: time.monotonic())
        """
        now = time.monotonic() if now is None else now
        self.animator.update(now)

        self._draw_backdrop(screen, now)

        if snapshot.encounter is not None and snapshot.rendered_center is not None:
            center = Point2D(
                x=snapshot.rendered_center.x + self.animator.shake_offset(now),
                y=snapshot.rendered_center.y,
            )
            self._draw_creature(screen, snapshot.encounter.creature, center, now)

        for anim in self.animator.departing():
            self._draw_departing(screen, anim, now)

        if snapshot.indicator is not None:
            self._draw_indicator(screen, snapshot.indicator)

        self._draw_status(screen, snapshot.status_text)
        if self.habitat is not None:
            self._draw_habitat(screen, self.habitat)
        if self.animator.toast:
            self._draw_toast(screen, self.animator.toast)

    # ------------------------------------------------------------------

    def _draw_backdrop(self, screen: pygame.Surface, now: float) -> None:
        """Stand-in for the camera feed: a slowly scrolling scan grid."""
        screen.fill(BACKGROUND_COLOR)
        width, height = screen.get_size()
        spacing = 60
        shift = int(now * 20) % spacing
        for x in range(-spacing + shift, width, spacing):
            pygame.draw.line(screen, GRID_COLOR, (x, 0), (x, height))
        for y in range(-spacing + shift, height, spacing):
            pygame.draw.line(screen, GRID_COLOR, (0, y), (width, y))

    def _draw_creature(
        self,
        screen: pygame.Surface,
        creature: Creature,
        center: Point2D,
        now: float,
        scale: float = 1.0,
        alpha: int = 255,
        badge: bool = True,
    ) -> None:
        size = self.creature_size * scale
        if size < 1:
            return
        radius = size / 2
        glow = 30 * (0.5 + 0.5 * math.sin(now * math.pi / 1.5))

        layer = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
        cx, cy = center.x, center.y

        glow_color = creature.type.secondary_color.with_alpha(min(alpha, 100))
        pygame.draw.circle(layer, glow_color.as_tuple, (int(cx), int(cy)), int(radius + glow))

        # Shadow
        pygame.draw.circle(layer, (0, 0, 0, min(alpha, 50)),
                           (int(cx + 5), int(cy + radius + 10)), int(radius * 0.8))

        body = creature.type.primary_color.with_alpha(alpha)
        pygame.draw.polygon(layer, body.as_tuple, _blob_points(cx, cy, radius, now, scale))

        # Highlight
        pygame.draw.circle(layer, (255, 255, 255, min(alpha, 80)),
                           (int(cx - radius * 0.3), int(cy - radius * 0.3)), int(radius * 0.2))

        self._draw_eyes(layer, cx, cy, size, alpha)
        screen.blit(layer, (0, 0))

        if badge:
            self._draw_type_badge(screen, creature.type, cx, cy + radius + 30)

    def _draw_eyes(self, layer: pygame.Surface, cx: float, cy: float, size: float, alpha: int) -> None:
        eye_dx = size * 0.15
        eye_dy = size * 0.1
        eye_radius = max(1, int(size * 0.12))
        pupil_radius = max(1, int(eye_radius * 0.5))
        for side in (-1, 1):
            ex = cx + side * eye_dx
            ey = cy - eye_dy
            pygame.draw.circle(layer, (255, 255, 255, alpha), (int(ex), int(ey)), eye_radius)
            pygame.draw.circle(layer, (0, 0, 0, alpha), (int(ex + 2), int(ey)), pupil_radius)

    def _draw_type_badge(self, screen: pygame.Surface, goop_type: GoopType, cx: float, cy: float) -> None:
        _, small = self._fonts()
        text = small.render(goop_type.display_name, True, TEXT_COLOR)
        padding = 16
        rect = pygame.Rect(0, 0, text.get_width() + padding * 2, 40)
        rect.center = (int(cx), int(cy))
        pygame.draw.rect(screen, goop_type.secondary_color.as_rgb_tuple, rect, border_radius=10)
        screen.blit(text, text.get_rect(center=rect.center))

    def _draw_departing(self, screen: pygame.Surface, anim: Animation, now: float) -> None:
        progress = anim.progress(now)
        creature = anim.cue.creature
        if anim.cue.kind == FeedbackKind.CAPTURE:
            # Shrink and fade together
            self._draw_creature(screen, creature, anim.cue.position, now,
                                scale=1.0 - progress, alpha=int(255 * (1.0 - progress)), badge=False)
            return

        # Escape: shake for the first half, fade for the second
        shake_part = 0.5
        if progress < shake_part:
            dx = _triangle_shake(progress / shake_part, ESCAPE_SHAKE_AMPLITUDE)
            alpha = 255
        else:
            dx = 0.0
            alpha = int(255 * (1.0 - (progress - shake_part) / (1.0 - shake_part)))
        position = Point2D(x=anim.cue.position.x + dx, y=anim.cue.position.y)
        self._draw_creature(screen, creature, position, now, alpha=alpha, badge=False)

    def _draw_indicator(self, screen: pygame.Surface, indicator: Indicator) -> None:
        """Arrow head at the indicator position, pointing along its angle."""
        length = 36.0
        half_width = 18.0
        px, py = indicator.position.x, indicator.position.y
        cos_a, sin_a = math.cos(indicator.angle), math.sin(indicator.angle)
        tip = (px + cos_a * length / 2, py + sin_a * length / 2)
        back_x, back_y = px - cos_a * length / 2, py - sin_a * length / 2
        left = (back_x - sin_a * half_width, back_y + cos_a * half_width)
        right = (back_x + sin_a * half_width, back_y - cos_a * half_width)
        pygame.draw.polygon(screen, INDICATOR_COLOR, [tip, left, right])

    def _draw_status(self, screen: pygame.Surface, text: str) -> None:
        if not text:
            return
        font, _ = self._fonts()
        width, height = screen.get_size()
        bar = pygame.Surface((width, 70), pygame.SRCALPHA)
        bar.fill(STATUS_BAR_COLOR)
        screen.blit(bar, (0, height - 70))
        rendered = font.render(text, True, TEXT_COLOR)
        screen.blit(rendered, rendered.get_rect(center=(width // 2, height - 35)))

    def _draw_habitat(self, screen: pygame.Surface, habitat: GoopType) -> None:
        _, small = self._fonts()
        text = small.render(habitat.display_name, True, TEXT_COLOR)
        rect = pygame.Rect(16, 16, text.get_width() + 24, 36)
        badge = pygame.Surface(rect.size, pygame.SRCALPHA)
        badge.fill(habitat.primary_color.with_alpha(128).as_tuple)
        screen.blit(badge, rect.topleft)
        screen.blit(text, text.get_rect(center=rect.center))

    def _draw_toast(self, screen: pygame.Surface, text: str) -> None:
        font, _ = self._fonts()
        width, height = screen.get_size()
        rendered = font.render(text, True, TEXT_COLOR)
        rect = rendered.get_rect(center=(width // 2, height - 130))
        backing = pygame.Surface(rect.inflate(32, 16).size, pygame.SRCALPHA)
        backing.fill((40, 40, 40, 200))
        screen.blit(backing, rect.inflate(32, 16).topleft)
        screen.blit(rendered, rect)


def _blob_points(cx: float, cy: float, radius: float, now: float, scale: float) -> List[Tuple[float, float]]:
    """Wobbly outline of a goop body."""
    points = []
    for i in range(WOBBLE_POINTS):
        angle = (i / WOBBLE_POINTS) * 2 * math.pi
        wobble = math.sin(angle * 3 + now * 5.0) * WOBBLE_AMOUNT * scale
        r = radius + wobble
        points.append((cx + r * math.cos(angle), cy + r * math.sin(angle)))
    return points
