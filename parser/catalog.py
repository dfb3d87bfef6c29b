"""Exercise catalog data model and the shipped builtin layer."""
from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from loguru import logger

from core.exceptions import ConfigurationError

BUILTIN_EXERCISES_PATH = Path(__file__).parent / "data" / "builtin_exercises.json"


class ExerciseOrigin(str, Enum):
    BUILTIN = "builtin"
    CUSTOM = "custom"


@dataclass(frozen=True)
class ExerciseCatalogEntry:
    """One canonical exercise and the phrases that resolve to it.

    Attributes:
        canonical_name: Display name, unique across the merged catalog
        aliases: Lowercase alternate phrases, in lookup order
        origin: Which layer the aliases come from
        group: Muscle group for builtin entries, None for custom ones
    """
    canonical_name: str
    aliases: Tuple[str, ...]
    origin: ExerciseOrigin
    group: Optional[str] = None

    @property
    def is_builtin(self) -> bool:
        return self.origin is ExerciseOrigin.BUILTIN


def _read_catalog_file(path: Path) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Failed to load exercise catalog {path}: {e}") from e


def load_builtin_groups(path: Optional[Path] = None) -> Dict[str, str]:
    """Map each builtin canonical name to its muscle group."""
    data = _read_catalog_file(Path(path) if path else BUILTIN_EXERCISES_PATH)
    groups: Dict[str, str] = {}
    for group in data.get("groups", []):
        for item in group.get("items", []):
            groups[item["name"]] = group.get("group", "")
    return groups


def load_builtin_exercises(path: Optional[Path] = None) -> Dict[str, List[str]]:
    """Load the builtin catalog as an ordered ``name -> aliases`` mapping.

    The file order is kept because resolution walks the catalog in that
    order and the first hit wins.
    """
    if path is None:
        return {name: list(aliases) for name, aliases in _default_builtin().items()}
    return _parse_catalog(_read_catalog_file(Path(path)))


@lru_cache(maxsize=1)
def _default_builtin() -> Dict[str, Tuple[str, ...]]:
    catalog = _parse_catalog(_read_catalog_file(BUILTIN_EXERCISES_PATH))
    logger.debug(f"Loaded {len(catalog)} builtin exercises")
    return {name: tuple(aliases) for name, aliases in catalog.items()}


def _parse_catalog(data: dict) -> Dict[str, List[str]]:
    catalog: Dict[str, List[str]] = {}
    for group in data.get("groups", []):
        for item in group.get("items", []):
            name = str(item.get("name", "")).strip()
            if not name:
                continue
            if name in catalog:
                raise ConfigurationError(f"Duplicate builtin exercise: {name}")
            catalog[name] = [str(a).lower().strip() for a in item.get("aliases", []) if str(a).strip()]
    return catalog
