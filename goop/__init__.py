"""
Goop Scan - encounter and capture engine for an AR creature-catching overlay.

Packages:
    goop.models: Pydantic data models
    goop.input: Tap events and tap sources

Core modules:
    goop.probability: Catch probability by rarity
    goop.targeting: Placement, hit testing and the off-screen indicator
    goop.capture: Capture state machine
    goop.spawner: Spawn scheduler
    goop.session: Session controller wiring it all together
"""

__version__ = "0.1.0"
