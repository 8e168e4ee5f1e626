"""
Goop scan - Configuration loader with scan presets.

Every tunable of the encounter engine lives in one EncounterConfig. Defaults
come from the environment (a .env file next to the working directory is
honored), presets bundle the spawn pacing observed in different scan modes,
and a YAML file can override any field.
"""
import os
from pathlib import Path
from typing import Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

load_dotenv()


def _get_bool(key: str, default: bool) -> bool:
    """Get boolean from environment."""
    val = os.getenv(key, str(default)).lower()
    return val in ('true', '1', 'yes')


def _get_int(key: str, default: int) -> int:
    """Get integer from environment."""
    return int(os.getenv(key, str(default)))


def _get_float(key: str, default: float) -> float:
    """Get float from environment."""
    return float(os.getenv(key, str(default)))


# Display
SCREEN_WIDTH = _get_int('GOOP_SCREEN_WIDTH', 720)
SCREEN_HEIGHT = _get_int('GOOP_SCREEN_HEIGHT', 1280)
FULLSCREEN = _get_bool('GOOP_FULLSCREEN', False)
TARGET_FPS = _get_int('GOOP_TARGET_FPS', 60)

# Default preset name
DEFAULT_PRESET = os.getenv('GOOP_PRESET', 'default')


class EncounterConfig(BaseModel):
    """Tunables for spawning, catching and on-screen targeting.

    Attributes:
        tick_interval: Seconds between spawn evaluations
        min_spawn_interval: Minimum seconds after the last spawn (or the end
            of the last encounter) before another creature may appear
        spawn_chance: Probability that an eligible tick spawns a creature
        max_attempts: Catch attempts per encounter before it escapes
        creature_size: Creature visual size; also the edge margin
        tap_tolerance: Hit radius as a fraction of creature_size
        bounce_amplitude: Maximum vertical bounce in pixels
        bounce_period: Seconds for one half of the bounce cycle
        indicator_distance: Distance of the off-screen glyph from center
    """
    model_config = ConfigDict(frozen=True)

    tick_interval: float = Field(
        default_factory=lambda: _get_float('GOOP_TICK_INTERVAL', 1.0), gt=0.0
    )
    min_spawn_interval: float = Field(
        default_factory=lambda: _get_float('GOOP_MIN_SPAWN_INTERVAL', 3.0), ge=0.0
    )
    spawn_chance: float = Field(
        default_factory=lambda: _get_float('GOOP_SPAWN_CHANCE', 0.30), ge=0.0, le=1.0
    )
    max_attempts: int = Field(
        default_factory=lambda: _get_int('GOOP_MAX_ATTEMPTS', 5), ge=1
    )
    creature_size: float = Field(
        default_factory=lambda: _get_float('GOOP_CREATURE_SIZE', 150.0), gt=0.0
    )
    tap_tolerance: float = Field(default=0.8, gt=0.0)
    bounce_amplitude: float = Field(default=20.0, ge=0.0)
    bounce_period: float = Field(default=1.0, gt=0.0)
    indicator_distance: float = Field(default=150.0, gt=0.0)


# Scan presets - spawn pacing bundles
SCAN_PRESETS: Dict[str, Dict[str, float]] = {
    'default': {},
    # Camera-driven scan: frames checked every 2s, 25% chance
    'scan': {
        'tick_interval': 2.0,
        'min_spawn_interval': 2.0,
        'spawn_chance': 0.25,
    },
    # Overlay timer: ticks every second, slower respawn, 35% chance
    'overlay': {
        'tick_interval': 1.0,
        'min_spawn_interval': 4.0,
        'spawn_chance': 0.35,
    },
}


def get_preset(name: str) -> EncounterConfig:
    """Build the EncounterConfig for a named preset.

    Raises:
        KeyError: If the preset does not exist
    """
    if name not in SCAN_PRESETS:
        raise KeyError(
            f"Unknown preset '{name}'. Available: {', '.join(sorted(SCAN_PRESETS))}"
        )
    return EncounterConfig(**SCAN_PRESETS[name])


def load_config(path: Optional[Path] = None, preset: Optional[str] = None) -> EncounterConfig:
    """Load an EncounterConfig from a YAML file and/or a preset.

    The YAML file may name a ``preset`` to start from; its remaining keys
    override the preset's values. An explicit ``preset`` argument wins over
    the one named in the file.

    Args:
        path: Optional YAML file
        preset: Optional preset name

    Returns:
        Validated EncounterConfig

    Raises:
        FileNotFoundError: If path does not exist
        ValueError: If the file is not a mapping or fails validation
    """
    overrides: Dict = {}
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, 'r') as f:
            try:
                loaded = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Failed to parse YAML file '{path}': {e}") from e

        if not isinstance(loaded, dict):
            raise ValueError(f"Config file '{path}' must contain a mapping")
        overrides = dict(loaded)

    preset_name = preset or overrides.pop('preset', None) or DEFAULT_PRESET
    overrides.pop('preset', None)

    if preset_name not in SCAN_PRESETS:
        raise ValueError(f"Unknown preset '{preset_name}'")

    values = {**SCAN_PRESETS[preset_name], **overrides}
    try:
        return EncounterConfig(**values)
    except ValidationError as e:
        raise ValueError(f"Invalid encounter configuration:\n{e}") from e
