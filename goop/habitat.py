"""
Habitat lookup from player coordinates.

A coarse stand-in for real biome data: the coordinates are hashed into one
of the five goop types, which the overlay shows as the local habitat.
"""
import math

from goop.models import GoopType

_HABITATS = (
    GoopType.WATER,
    GoopType.FIRE,
    GoopType.NATURE,
    GoopType.ELECTRIC,
)


def detect_habitat(latitude: float, longitude: float) -> GoopType:
    """Map coordinates to a habitat type.

    The hash keeps the sign of the coordinates, so negative hashes land on
    SHADOW.

    Examples:
        >>> detect_habitat(0.0, 0.0)
        <GoopType.WATER: 'water'>
        >>> detect_habitat(0.0, 0.0045)
        <GoopType.SHADOW: 'shadow'>
    """
    coordinate_hash = int(latitude * 1000 + longitude * 1000)
    remainder = int(math.fmod(coordinate_hash, 5))
    if 0 <= remainder < len(_HABITATS):
        return _HABITATS[remainder]
    return GoopType.SHADOW
