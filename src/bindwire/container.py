from __future__ import annotations

import logging
from typing import Any, TypeVar, overload

from bindwire.aliases import AliasTable
from bindwire.bindings import Binding, BindingRegistry, Lifetime, Recipe
from bindwire.exceptions import (
    AliasCycleError,
    CircularDependencyError,
    InvalidRegistrationError,
    RecipeConstructionError,
    ResolutionError,
    UnknownBindingError,
)
from bindwire.keys import CONTAINER, SETTINGS, TypedKey, key_name
from bindwire.resolution_stack import current_stack, find_cycle, push_key
from bindwire.settings import ContainerSettings

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _is_key(name: object) -> bool:
    return isinstance(name, str) and bool(name)


def _validate_binding(name: object, recipe: object, lifetime: object) -> None:
    if not _is_key(name):
        msg = f"Binding key must be a non-empty string, got {name!r}."
        raise InvalidRegistrationError(msg)
    if not callable(recipe):
        msg = f"Recipe for {name!r} must be callable, got {recipe!r}."
        raise InvalidRegistrationError(msg)
    if not isinstance(lifetime, Lifetime):
        msg = f"Lifetime for {name!r} must be a Lifetime member, got {lifetime!r}."
        raise InvalidRegistrationError(msg)


class Container:
    """Resolve string keys to values using registered recipes.

    Bindings are registered under string keys (or ``TypedKey`` wrappers) with a
    ``Lifetime``. ``SINGLETON`` recipes run once for the container's lifetime,
    guarded by a per-binding lock so concurrent first resolutions construct a
    single value. ``TRANSIENT`` recipes run on every ``resolve`` call.

    Recipes receive the container and may ``resolve`` their own dependencies.
    A recipe that transitively requests its own key fails with
    ``CircularDependencyError`` instead of recursing.

    Registration is expected to happen during startup. Concurrent mutation
    while other threads resolve is not guarded.

    Examples:
        .. code-block:: python

            container = Container()
            container.singleton("db", lambda container: Database())
            container.alias("database", "db")

            assert container.resolve("database") is container.resolve("db")

    """

    def __init__(self, settings: ContainerSettings | None = None) -> None:
        """Initialize an empty container.

        Args:
            settings: Container configuration. Defaults to values read from
                ``BINDWIRE_*`` environment variables.

        """
        self.settings = settings if settings is not None else ContainerSettings()
        self._registry = BindingRegistry()
        self._aliases = AliasTable()
        # Canonical key -> binding that was active before the first fake.
        self._fakes: dict[str, Binding | None] = {}

        self.singleton(CONTAINER, lambda container: container)
        self.singleton(SETTINGS, lambda container: container.settings)

    def register(
        self,
        key: str | TypedKey[Any],
        recipe: Recipe,
        lifetime: Lifetime = Lifetime.TRANSIENT,
    ) -> None:
        """Register a recipe under ``key``.

        Registering an existing key replaces its binding, including any cached
        singleton value. The last registration wins.

        Args:
            key: Binding key.
            recipe: Callable receiving this container and returning the value.
            lifetime: ``Lifetime.TRANSIENT`` or ``Lifetime.SINGLETON``.

        Raises:
            InvalidRegistrationError: If the key is not a non-empty string, the
                recipe is not callable or the lifetime is not a ``Lifetime``.

        """
        name = key_name(key)
        _validate_binding(name, recipe, lifetime)

        previous = self._registry.register(name, recipe, lifetime)
        if previous is not None:
            self._log_override("binding", name)
        logger.debug("Registered %s binding %r", lifetime.name.lower(), name)

    def singleton(self, key: str | TypedKey[Any], recipe: Recipe) -> None:
        """Register ``recipe`` under ``key`` with ``Lifetime.SINGLETON``."""
        self.register(key, recipe, Lifetime.SINGLETON)

    def bind(self, key: str | TypedKey[Any], recipe: Recipe) -> None:
        """Register ``recipe`` under ``key`` with ``Lifetime.TRANSIENT``."""
        self.register(key, recipe, Lifetime.TRANSIENT)

    def alias(self, name: str | TypedKey[Any], target_key: str | TypedKey[Any]) -> None:
        """Make ``name`` resolve through to ``target_key``.

        The target does not have to be registered yet; it is looked up when
        ``name`` is resolved.

        Raises:
            InvalidRegistrationError: If either name is not a non-empty string or
                the alias points at itself.

        """
        alias_name = key_name(name)
        target = key_name(target_key)
        if not _is_key(alias_name) or not _is_key(target):
            msg = f"Alias and target must be non-empty strings, got {alias_name!r} -> {target!r}."
            raise InvalidRegistrationError(msg)
        if alias_name == target:
            msg = f"Alias {alias_name!r} cannot point at itself."
            raise InvalidRegistrationError(msg)

        previous = self._aliases.alias(alias_name, target)
        if previous is not None and previous != target:
            self._log_override("alias", alias_name)
        logger.debug("Aliased %r -> %r", alias_name, target)

    def canonical_key(self, key: str | TypedKey[Any]) -> str:
        """Follow the alias chain of ``key`` and return the key it ends on.

        Unaliased keys are returned unchanged.

        Raises:
            AliasCycleError: If the chain loops or is longer than
                ``settings.max_alias_depth`` hops.

        """
        current = key_name(key)
        chain = [current]
        for _ in range(self.settings.max_alias_depth):
            target = self._aliases.resolve_alias(current)
            if target == current:
                return current
            if target in chain:
                chain.append(target)
                raise AliasCycleError(chain)
            chain.append(target)
            current = target

        if self._aliases.is_alias(current):
            raise AliasCycleError([*chain, self._aliases.resolve_alias(current)])
        return current

    def has(self, key: str | TypedKey[Any]) -> bool:
        """Return whether ``key`` resolves to a registered binding."""
        try:
            canonical = self.canonical_key(key)
        except AliasCycleError:
            return False
        return self._registry.has(canonical)

    def registered_keys(self) -> list[str]:
        """Return every registered binding key, in registration order."""
        return self._registry.keys()

    @overload
    def resolve(self, key: TypedKey[T]) -> T: ...

    @overload
    def resolve(self, key: str) -> Any: ...

    def resolve(self, key: str | TypedKey[Any]) -> Any:
        """Resolve ``key`` to a value, applying alias and lifetime rules.

        Args:
            key: A binding key or alias.

        Returns:
            The cached value for singletons, or a freshly constructed value.

        Raises:
            UnknownBindingError: If no binding exists after alias resolution.
            AliasCycleError: If the alias chain loops or is too deep.
            CircularDependencyError: If the key is already being constructed
                by the current call chain.
            RecipeConstructionError: If the recipe raised.

        """
        requested = key_name(key)
        canonical = self.canonical_key(requested)
        binding = self._registry.find(canonical)
        if binding is None:
            raise UnknownBindingError(canonical, requested)

        cycle = find_cycle(current_stack(), canonical)
        if cycle is not None:
            raise CircularDependencyError(cycle)

        with push_key(canonical):
            if binding.lifetime is Lifetime.SINGLETON:
                return self._resolve_singleton(binding)
            return self._construct(binding)

    def fake(
        self,
        key: str | TypedKey[Any],
        recipe: Recipe,
        lifetime: Lifetime = Lifetime.TRANSIENT,
    ) -> None:
        """Temporarily replace the binding behind ``key`` with a test double.

        The binding active before the first fake of a key is kept and put back
        by ``restore``.

        Raises:
            InvalidRegistrationError: On the same inputs ``register`` rejects.

        """
        _validate_binding(key_name(key), recipe, lifetime)
        canonical = self.canonical_key(key)
        if canonical not in self._fakes:
            self._fakes[canonical] = self._registry.find(canonical)
        self._registry.register(canonical, recipe, lifetime)
        logger.debug("Faked binding %r", canonical)

    def restore(self, key: str | TypedKey[Any]) -> None:
        """Undo ``fake`` for ``key``. Keys that are not faked are left alone."""
        canonical = self.canonical_key(key)
        if canonical not in self._fakes:
            return
        original = self._fakes.pop(canonical)
        if original is None:
            self._registry.remove(canonical)
        else:
            self._registry.put(original)
        logger.debug("Restored binding %r", canonical)

    def restore_all(self) -> None:
        """Undo every active fake."""
        for canonical in list(self._fakes):
            self.restore(canonical)

    def _resolve_singleton(self, binding: Binding) -> Any:
        if binding.is_cached:
            return binding.cached_value

        with binding.lock:
            # Second check after acquiring the lock
            if binding.is_cached:
                return binding.cached_value
            value = self._construct(binding)
            binding.cache(value)
            logger.debug("Constructed singleton %r", binding.key)
            return value

    def _construct(self, binding: Binding) -> Any:
        try:
            return binding.recipe(self)
        except ResolutionError:
            raise
        except Exception as exc:
            raise RecipeConstructionError(binding.key, exc) from exc

    def _log_override(self, kind: str, name: str) -> None:
        if self.settings.warn_on_override:
            logger.warning("Overriding existing %s %r", kind, name)
        else:
            logger.debug("Overriding existing %s %r", kind, name)
