"""
Exercise name resolution for the Workout Logging Application.

This module maps free-text exercise phrases (typically the residue of a
speech transcript) onto canonical exercise names. The catalog is made of two
layers: the builtin exercises shipped with the application and a user-defined
custom layer that is persisted through a storage collaborator.

Classes:
    MatchStrategy: Which resolution pass produced a match
    ExerciseMatch: A resolved name together with the pass that found it
    ExerciseResolver: Owns the merged catalog and resolves phrases

Matching Strategies (strictly ordered, first hit wins):
    1. Exact canonical name, case-insensitive
    2. Exact alias, case-insensitive
    3. Substring containment in either direction, name first then aliases

There is no scoring inside ``resolve``: within a pass the first catalog entry
in iteration order wins. Ranked suggestions for autocomplete are served
separately by ``suggest``.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from loguru import logger
from rapidfuzz import fuzz, process

from core.exceptions import CatalogError, PersistenceError
from .catalog import ExerciseCatalogEntry, ExerciseOrigin, load_builtin_exercises, load_builtin_groups
from .text_utils import capitalize_words, normalize_aliases


class MatchStrategy(str, Enum):
    NAME = "name"
    ALIAS = "alias"
    FUZZY = "fuzzy"


@dataclass(frozen=True)
class ExerciseMatch:
    """Resolved canonical name plus the catalog text that matched."""
    name: str
    strategy: MatchStrategy
    matched_on: str


class ExerciseResolver:
    """
    Merged builtin + custom exercise catalog with phrase resolution.

    The custom layer overlays the builtin one: a custom entry with the same
    name as a builtin replaces its aliases outright (no merging) while keeping
    the builtin's position in iteration order. Builtin entries can never be
    deleted, only shadowed.

    Every mutation normalizes its input, stages a copy of the custom layer,
    hands the copy to the store and only then commits it in memory. If the
    store fails, a ``PersistenceError`` is raised and the catalog is left as
    it was.

    Usage:
        resolver = ExerciseResolver(store=JsonCustomExerciseStore(path))
        resolver.resolve("bb bench")          # -> "Bench Press"
        resolver.add_exercise("zercher squat", ["zercher"])
    """

    def __init__(
        self,
        store=None,
        builtin: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> None:
        """
        Args:
            store: Object exposing ``get_custom_exercises()`` and
                ``save_custom_exercises(mapping)``; None keeps the custom
                layer in memory only
            builtin: Builtin layer override (defaults to the shipped catalog)
        """
        self._store = store
        if builtin is None:
            builtin = load_builtin_exercises()
            self._groups = load_builtin_groups()
        else:
            self._groups = {}
        self._builtin: Mapping[str, Tuple[str, ...]] = MappingProxyType(
            {name: tuple(aliases) for name, aliases in builtin.items()}
        )
        self._custom: Dict[str, List[str]] = {}
        self.reload()

        logger.debug(
            f"ExerciseResolver initialized with {len(self._builtin)} builtin "
            f"and {len(self._custom)} custom exercises"
        )

    # ------------------------------------------------------------------ layers

    @property
    def builtin(self) -> Mapping[str, Tuple[str, ...]]:
        """Read-only builtin layer."""
        return self._builtin

    @property
    def custom(self) -> Dict[str, List[str]]:
        """Copy of the custom layer."""
        return {name: list(aliases) for name, aliases in self._custom.items()}

    def reload(self) -> None:
        """Replace the custom layer with whatever the store currently holds."""
        if self._store is None:
            return
        try:
            stored = self._store.get_custom_exercises() or {}
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to load custom exercises: {e}") from e
        for name, aliases in stored.items():
            if not isinstance(aliases, (list, tuple)):
                raise PersistenceError(f"Aliases of '{name}' must be a list, got {type(aliases).__name__}")
        self._custom = {str(name): normalize_aliases(aliases) for name, aliases in stored.items()}

    def list_all(self) -> Dict[str, List[str]]:
        """Merged ``name -> aliases`` view; custom entries override builtins."""
        merged: Dict[str, List[str]] = {name: list(aliases) for name, aliases in self._builtin.items()}
        for name, aliases in self._custom.items():
            merged[name] = list(aliases)
        return merged

    def entries(self) -> List[ExerciseCatalogEntry]:
        """Merged catalog as entries tagged with the layer their aliases come from."""
        result = []
        for name, aliases in self.list_all().items():
            origin = ExerciseOrigin.CUSTOM if name in self._custom else ExerciseOrigin.BUILTIN
            result.append(ExerciseCatalogEntry(
                canonical_name=name,
                aliases=tuple(aliases),
                origin=origin,
                group=self._groups.get(name),
            ))
        return result

    def exercise_names(self) -> List[str]:
        return sorted(self.list_all())

    def get_aliases(self, name: str) -> List[str]:
        return self.list_all().get(name, [])

    def is_custom(self, name: str) -> bool:
        """True only for user-created exercises, not for shadowed builtins."""
        return name in self._custom and name not in self._builtin

    # --------------------------------------------------------------- resolving

    def resolve(self, text: str) -> Optional[str]:
        """Resolve a phrase to a canonical exercise name, or None."""
        found = self.match(text)
        return found.name if found else None

    def match(self, text: str) -> Optional[ExerciseMatch]:
        """
        Run the three resolution passes and report which one matched.

        Args:
            text: Free-text exercise phrase

        Returns:
            Optional[ExerciseMatch]: None when no pass matches or the phrase is blank
        """
        needle = (text or "").lower().strip()
        if not needle:
            return None

        catalog = self.list_all()

        for name in catalog:
            if name.lower() == needle:
                return ExerciseMatch(name, MatchStrategy.NAME, name)

        for name, aliases in catalog.items():
            for alias in aliases:
                if alias.lower() == needle:
                    return ExerciseMatch(name, MatchStrategy.ALIAS, alias)

        for name, aliases in catalog.items():
            name_lower = name.lower()
            if needle in name_lower or name_lower in needle:
                return ExerciseMatch(name, MatchStrategy.FUZZY, name)
            for alias in aliases:
                alias_lower = alias.lower()
                if needle in alias_lower or alias_lower in needle:
                    return ExerciseMatch(name, MatchStrategy.FUZZY, alias)

        logger.debug(f"No exercise match for '{needle}'")
        return None

    def suggest(self, text: str, limit: int = 5) -> List[Tuple[str, float]]:
        """
        Rank canonical names against a partial phrase for autocomplete.

        Args:
            text: Partial exercise name
            limit: Maximum number of suggestions

        Returns:
            List of (canonical name, confidence 0.0-1.0), best first
        """
        if not text or not text.strip():
            return []

        choices = {name: " ".join([name.lower(), *aliases]) for name, aliases in self.list_all().items()}
        matches = process.extract(
            text.lower().strip(),
            choices,
            scorer=fuzz.partial_ratio,
            limit=limit,
            score_cutoff=60,
        )
        return [(name, score / 100.0) for _, score, name in matches]

    # --------------------------------------------------------------- mutations

    def add_exercise(self, name: str, aliases: Iterable[str] = ()) -> str:
        """
        Add (or overwrite) a custom exercise.

        Args:
            name: Exercise name, title-cased before storing
            aliases: Alternate phrases, lowercased and trimmed

        Returns:
            str: The normalized canonical name

        Raises:
            CatalogError: If the name is blank
            PersistenceError: If the store rejects the write (catalog unchanged)
        """
        normalized_name = self._normalize_name(name)
        staged = self.custom
        staged[normalized_name] = normalize_aliases(aliases)
        self._commit(staged)
        logger.info(f"Added exercise '{normalized_name}' with {len(staged[normalized_name])} aliases")
        return normalized_name

    def update_exercise(self, name: str, aliases: Iterable[str]) -> str:
        """Replace the aliases of ``name``, shadowing a builtin if needed; returns the normalized name."""
        normalized_name = self._normalize_name(name)
        staged = self.custom
        staged[normalized_name] = normalize_aliases(aliases)
        self._commit(staged)
        if normalized_name in self._builtin:
            logger.info(f"Builtin exercise '{normalized_name}' now uses custom aliases")
        else:
            logger.info(f"Updated exercise '{normalized_name}'")
        return normalized_name

    def delete_exercise(self, name: str) -> bool:
        """
        Remove a custom entry.

        Returns:
            bool: False without any effect when ``name`` has no custom entry,
            which includes every builtin-only exercise
        """
        key = name if name in self._custom else capitalize_words((name or "").strip())
        if key not in self._custom:
            logger.debug(f"Delete ignored, '{name}' has no custom entry")
            return False

        staged = self.custom
        del staged[key]
        self._commit(staged)
        logger.info(f"Deleted custom exercise '{key}'")
        return True

    def replace_custom(self, custom: Mapping[str, Iterable[str]]) -> None:
        """Overwrite the whole custom layer, e.g. when importing a backup."""
        for name, aliases in custom.items():
            if not isinstance(aliases, (list, tuple)):
                raise CatalogError(f"Aliases of '{name}' must be a list, got {type(aliases).__name__}")
        staged = {str(name): normalize_aliases(aliases) for name, aliases in custom.items()}
        self._commit(staged)
        logger.info(f"Replaced custom layer with {len(staged)} exercises")

    @staticmethod
    def _normalize_name(name: str) -> str:
        normalized = capitalize_words((name or "").strip())
        if not normalized:
            raise CatalogError("Exercise name cannot be empty")
        return normalized

    def _commit(self, staged: Dict[str, List[str]]) -> None:
        if self._store is not None:
            try:
                self._store.save_custom_exercises(staged)
            except PersistenceError:
                logger.error("Saving custom exercises failed; catalog left unchanged")
                raise
            except Exception as e:
                logger.error(f"Saving custom exercises failed: {e}")
                raise PersistenceError(f"Failed to save custom exercises: {e}") from e
        self._custom = staged
