from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, TypeAlias

from bindwire.exceptions import UnknownBindingError

if TYPE_CHECKING:
    from collections.abc import Callable

    from bindwire.container import Container

Recipe: TypeAlias = "Callable[[Container], Any]"
"""A callable that receives the container and returns the bound value."""

_UNSET: Any = object()


class Lifetime(Enum):
    """Defines how often a binding's recipe runs."""

    TRANSIENT = auto()
    """The recipe runs on every resolution."""

    SINGLETON = auto()
    """The recipe runs once and its value is shared for the container's lifetime."""


@dataclass(slots=True, eq=False)
class Binding:
    """A registered recipe for a key, tagged with its lifetime.

    A singleton binding owns the lock that serializes its first construction
    and the cached value produced by it. Re-registering a key replaces the
    whole binding, so a fresh registration never inherits a stale cache.
    """

    key: str
    recipe: Recipe
    lifetime: Lifetime
    cached_value: Any = field(default=_UNSET, repr=False)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def is_cached(self) -> bool:
        """Return whether a singleton value has been constructed."""
        return self.cached_value is not _UNSET

    def cache(self, value: Any) -> None:
        """Store the first successfully constructed singleton value."""
        if self.lifetime is Lifetime.SINGLETON and not self.is_cached:
            self.cached_value = value


class BindingRegistry:
    """Holds the key to binding mappings of a container.

    The registry only stores bindings and never constructs values.
    """

    def __init__(self) -> None:
        self._bindings: dict[str, Binding] = {}

    def register(self, key: str, recipe: Recipe, lifetime: Lifetime) -> Binding | None:
        """Store the binding for ``key``, replacing any existing one.

        Returns:
            The binding that was replaced, or ``None`` for a new key.

        """
        previous = self._bindings.get(key)
        self._bindings[key] = Binding(key=key, recipe=recipe, lifetime=lifetime)
        return previous

    def put(self, binding: Binding) -> None:
        """Store an existing binding object, keeping its cached value."""
        self._bindings[binding.key] = binding

    def remove(self, key: str) -> Binding | None:
        """Drop the binding for ``key`` if it exists."""
        return self._bindings.pop(key, None)

    def has(self, key: str) -> bool:
        return key in self._bindings

    def find(self, key: str) -> Binding | None:
        """Get a binding by key, if it exists."""
        return self._bindings.get(key)

    def get(self, key: str) -> Binding:
        """Get a binding by key or raise ``UnknownBindingError``."""
        binding = self._bindings.get(key)
        if binding is None:
            raise UnknownBindingError(key)
        return binding

    def keys(self) -> list[str]:
        return list(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)
