#!/usr/bin/env python3
"""
Goop Scan - desktop launcher for the AR catch overlay.

Runs a scan session in a pygame window. The camera feed is replaced by a
scrolling grid; click (or touch) a goop to try to catch it.

Usage:
    # Default preset and catalog
    python -m goop

    # Faster spawns, custom catalog, a fixed location
    python -m goop --preset overlay --catalog my_goops.yaml --lat 51.5 --lng -0.12

    # Tunables from a YAML file
    python -m goop --config scan.yaml --resolution 720x1280
"""

import argparse
import asyncio
import sys
import time
from pathlib import Path
from typing import Optional, Tuple

import pygame

from goop import config as goop_config
from goop.catalog import load_catalog
from goop.collaborators import InMemoryCreatureRepository
from goop.input.sources.pygame_source import PygameTapSource
from goop.logging import (
    close_all_sinks,
    configure_logging,
    create_sink_for_environment,
    get_logger,
    register_sink,
)
from goop.models import CatchOutcome, Creature, Encounter, FeedbackCue, Resolution
from goop.overlay import OverlayRenderer
from goop.session import SessionController, SessionListener

log = get_logger('app')


class OverlayListener(SessionListener):
    """Forwards session notifications to the overlay renderer."""

    def __init__(self, renderer: OverlayRenderer):
        self.renderer = renderer

    def on_encounter_started(self, encounter: Encounter) -> None:
        self.renderer.animator.show_toast(f"Wild {encounter.creature.name}!", time.monotonic())

    def on_encounter_resolved(self, outcome: CatchOutcome, creature: Creature) -> None:
        log.info("%s %s", creature.name, outcome.value)

    def on_feedback(self, cue: FeedbackCue) -> None:
        self.renderer.animator.play(cue, time.monotonic())

    def on_toast(self, text: str) -> None:
        self.renderer.animator.show_toast(text, time.monotonic())


class ScanApp:
    """Pygame host for a scan session."""

    def __init__(
        self,
        encounter_config: goop_config.EncounterConfig,
        repository: InMemoryCreatureRepository,
        resolution: Tuple[int, int],
        fullscreen: bool = False,
        location: Optional[Tuple[float, float]] = None,
    ):
        self.encounter_config = encounter_config
        self.repository = repository
        self.resolution = resolution
        self.fullscreen = fullscreen
        self.location = location
        self.running = False

    async def run(self) -> None:
        """Main async loop. Yields to the event loop every frame."""
        pygame.init()
        flags = pygame.FULLSCREEN if self.fullscreen else pygame.RESIZABLE
        screen = pygame.display.set_mode(self.resolution, flags)
        pygame.display.set_caption("Goop Scan")
        width, height = screen.get_size()

        renderer = OverlayRenderer(creature_size=self.encounter_config.creature_size)
        taps = PygameTapSource(width, height)
        controller = SessionController(
            self.encounter_config,
            supply=self.repository,
            recorder=self.repository,
            viewport=Resolution(width=width, height=height),
            listener=OverlayListener(renderer),
        )
        if self.location is not None:
            renderer.habitat = controller.set_location(*self.location)

        controller.start()
        clock = pygame.time.Clock()
        self.running = True

        try:
            while self.running:
                dt = clock.tick(goop_config.TARGET_FPS) / 1000.0

                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self.running = False
                    elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                        self.running = False
                    elif event.type == pygame.VIDEORESIZE:
                        controller.resize(event.w, event.h)
                        taps.resize(event.w, event.h)
                    else:
                        taps.handle_pygame_event(event)

                taps.update(dt)
                for tap in taps.poll_events():
                    controller.handle_tap(tap)

                renderer.render(screen, controller.update_frame())
                pygame.display.flip()

                # Let scheduler ticks and persistence run
                await asyncio.sleep(0)
        finally:
            await controller.shutdown()
            await controller.drain()
            pygame.quit()
            log.info("Caught %d goop(s) this session", self.repository.total_caught)


def _parse_resolution(value: str) -> Tuple[int, int]:
    try:
        width, height = value.lower().split('x')
        return int(width), int(height)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid resolution '{value}', expected WIDTHxHEIGHT"
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Goop Scan - catch goops on a simulated AR overlay',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m goop                          # Default settings
  python -m goop --preset overlay         # Faster-paced spawns
  python -m goop --lat 40.7 --lng -74.0   # Show the local habitat
        """
    )
    parser.add_argument(
        '--resolution', '-r',
        type=_parse_resolution,
        default=(goop_config.SCREEN_WIDTH, goop_config.SCREEN_HEIGHT),
        help='Window resolution as WIDTHxHEIGHT (default: %(default)s)'
    )
    parser.add_argument(
        '--fullscreen', '-f',
        action='store_true',
        default=goop_config.FULLSCREEN,
        help='Run in fullscreen mode'
    )
    parser.add_argument(
        '--preset', '-p',
        choices=sorted(goop_config.SCAN_PRESETS),
        default=None,
        help='Spawn pacing preset'
    )
    parser.add_argument(
        '--config', '-c',
        type=Path,
        default=None,
        help='YAML file overriding encounter settings'
    )
    parser.add_argument(
        '--catalog',
        type=Path,
        default=None,
        help='YAML creature catalog (default: bundled catalog)'
    )
    parser.add_argument('--lat', type=float, default=None, help='Player latitude')
    parser.add_argument('--lng', type=float, default=None, help='Player longitude')
    parser.add_argument(
        '--log-level',
        default=None,
        help='Log level (TRACE, DEBUG, INFO, WARNING, ERROR)'
    )
    return parser


def main(argv=None) -> int:
    """Main entry point for the scan overlay."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        configure_logging(level=args.log_level)

    try:
        encounter_config = goop_config.load_config(args.config, preset=args.preset)
        creatures = load_catalog(args.catalog)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    location = None
    if args.lat is not None and args.lng is not None:
        location = (args.lat, args.lng)

    for module in ('encounters', 'catches'):
        register_sink(module, create_sink_for_environment(module))

    app = ScanApp(
        encounter_config,
        InMemoryCreatureRepository(creatures),
        resolution=args.resolution,
        fullscreen=args.fullscreen,
        location=location,
    )
    try:
        asyncio.run(app.run())
    except KeyboardInterrupt:
        pass
    finally:
        close_all_sinks()
    return 0


if __name__ == '__main__':
    sys.exit(main())
