"""
Creature catalog loading - YAML with Pydantic validation.

The catalog is a YAML document with a top-level ``creatures`` list. Each
entry is validated as a Creature.

Examples:
    >>> creatures = load_catalog()
    >>> creatures[0].name
    'Bloop'
"""

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import ValidationError

from goop.models import Creature

DEFAULT_CATALOG = Path(__file__).parent / "data" / "creatures.yaml"


def load_catalog(path: Optional[Path] = None) -> List[Creature]:
    """Load and validate a creature catalog.

    Args:
        path: YAML catalog file (default: the bundled catalog)

    Returns:
        Creatures in file order

    Raises:
        FileNotFoundError: If the catalog file doesn't exist
        ValueError: If the YAML is malformed, an entry is invalid,
            or two entries share an id
    """
    yaml_path = Path(path) if path is not None else DEFAULT_CATALOG

    if not yaml_path.exists():
        raise FileNotFoundError(f"Creature catalog not found: {yaml_path}")

    try:
        with open(yaml_path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML file '{yaml_path}': {e}") from e

    entries = data.get('creatures') if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise ValueError(f"Catalog '{yaml_path}' must define a 'creatures' list")

    creatures: List[Creature] = []
    seen = set()
    for index, entry in enumerate(entries):
        try:
            creature = Creature(**entry)
        except (ValidationError, TypeError) as e:
            raise ValueError(
                f"Invalid creature #{index} in '{yaml_path}':\n{e}"
            ) from e

        if creature.id in seen:
            raise ValueError(f"Duplicate creature id {creature.id} in '{yaml_path}'")
        seen.add(creature.id)
        creatures.append(creature)

    return creatures
