"""Dependency container used to wire the application's collaborators."""
from __future__ import annotations

from typing import Any, Callable, Dict, List


class Container:
    """Name-keyed registry of instances and lazily built singletons.

    The resolver, parser, stores and speech capture are registered here once
    at startup so each collaborator is constructed exactly once and handed to
    whoever needs it instead of living in module globals.
    """

    def __init__(self) -> None:
        self._instances: Dict[str, Any] = {}
        self._factories: Dict[str, Callable[[], Any]] = {}

    def register(self, name: str, instance: Any) -> None:
        """Register a ready-made instance."""
        self._instances[name] = instance

    def register_factory(self, name: str, factory: Callable[[], Any]) -> None:
        """Register a factory; it runs on first ``get`` and the result is cached."""
        self._instances.pop(name, None)
        self._factories[name] = factory

    def get(self, name: str) -> Any:
        if name in self._instances:
            return self._instances[name]

        if name in self._factories:
            instance = self._factories[name]()
            self._instances[name] = instance
            return instance

        raise KeyError(f"Service '{name}' not found in container")

    def has(self, name: str) -> bool:
        return name in self._instances or name in self._factories

    def built(self) -> List[str]:
        """Names of services that have actually been instantiated."""
        return list(self._instances)

    def clear(self) -> None:
        """Drop all registrations (useful for testing)."""
        self._instances.clear()
        self._factories.clear()
