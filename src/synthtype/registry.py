"""Process-wide registry of generated types.

Every synthesizer goes through ``get_or_create`` so that a given
(strategy, target, auxiliary key) is synthesized at most once and always
resolves to the same class, even when threads race for it.

Usage:
    from synthtype.registry import Strategy, TypeKey, get_registry

    key = TypeKey(Strategy.STUB, Repository)
    handle = get_registry().get_or_create(key, lambda: build_stub(Repository))
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from synthtype.errors import InternalInvariantError, type_name
from synthtype.logging import get_logger

_log = get_logger("registry")


class Strategy(Enum):
    """How a generated type's members are bodied."""

    STUB = "stub"
    FORWARD = "forward"
    LAZY = "lazy"
    MOCK = "mock"


@dataclass(frozen=True)
class TypeKey:
    """Cache key for one generated type.

    Attributes:
        strategy: Synthesis strategy
        target: The class being synthesized for
        auxiliary: Source class for forwarders, key property name for lazy
            wrappers, None otherwise
    """

    strategy: Strategy
    target: type
    auxiliary: Hashable = None

    def describe(self) -> str:
        aux = ""
        if isinstance(self.auxiliary, type):
            aux = f" <- {type_name(self.auxiliary)}"
        elif self.auxiliary is not None:
            aux = f" [{self.auxiliary}]"
        return f"{self.strategy.value}:{type_name(self.target)}{aux}"


@dataclass
class RegistryStats:
    """Statistics for registry lookups."""

    hits: int = 0
    misses: int = 0
    failures: int = 0
    entries: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "failures": self.failures,
            "entries": self.entries,
            "hit_rate": f"{self.hit_rate:.2%}",
        }


class TypeRegistry:
    """Define-if-absent store of generated types.

    Entries are never evicted. Lookups and builds share one re-entrant lock so
    a build may itself request other generated types.
    """

    def __init__(self) -> None:
        self._types: dict[TypeKey, type] = {}
        self._lock = threading.RLock()
        self._stats = RegistryStats()

    @property
    def stats(self) -> RegistryStats:
        with self._lock:
            self._stats.entries = len(self._types)
            return RegistryStats(**vars(self._stats))

    def __len__(self) -> int:
        with self._lock:
            return len(self._types)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._types

    def keys(self) -> list[TypeKey]:
        with self._lock:
            return list(self._types)

    def get(self, key: TypeKey) -> type | None:
        with self._lock:
            return self._types.get(key)

    def get_or_create(self, key: TypeKey, build: Callable[[], type]) -> type:
        """Return the type for ``key``, building it on first request.

        A build that raises leaves the registry untouched and the exception
        propagates to the caller.

        Raises:
            InternalInvariantError: If ``build`` returns something other than
                a class
        """
        with self._lock:
            existing = self._types.get(key)
            if existing is not None:
                self._stats.hits += 1
                return existing

            self._stats.misses += 1
            try:
                with _log.timed("synthesize", key=key.describe()):
                    handle = build()
            except BaseException:
                self._stats.failures += 1
                raise

            if not isinstance(handle, type):
                self._stats.failures += 1
                raise InternalInvariantError(
                    f"Synthesis of {key.describe()} produced {type(handle).__name__}, not a class",
                    context={"key": key.describe()},
                )

            self._types[key] = handle
            _log.debug("registered generated type", key=key.describe(), type=handle.__name__)
            return handle

    def clear(self) -> None:
        """Forget every generated type. Intended for test isolation."""
        with self._lock:
            self._types.clear()
            self._stats = RegistryStats()


# =============================================================================
# Global Registry Instance
# =============================================================================

_registry: TypeRegistry | None = None
_registry_lock = threading.Lock()


def get_registry() -> TypeRegistry:
    """Get the process-wide registry, creating it on first use."""
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = TypeRegistry()
        return _registry


def set_registry(registry: TypeRegistry) -> None:
    """Install a registry as the process-wide instance."""
    global _registry
    with _registry_lock:
        _registry = registry


def reset_registry() -> TypeRegistry:
    """Replace the process-wide registry with a fresh, empty one."""
    registry = TypeRegistry()
    set_registry(registry)
    return registry
