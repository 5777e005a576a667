from __future__ import annotations

from collections.abc import Sequence


class BindwireError(Exception):
    """Represent a base class for all bindwire-specific failures.

    Catch this type when you want to handle any bindwire error path without
    matching each concrete exception class individually.
    """


class InvalidRegistrationError(BindwireError):
    """Signal an invalid registration payload.

    Raised by ``Container.register``, ``Container.alias`` and
    ``ContextExtension.define`` when a key is empty, a recipe or factory is not
    callable, or an alias points at itself.
    """


class ResolutionError(BindwireError):
    """Group every failure that can surface from ``Container.resolve``.

    Recipes that call ``resolve`` for their own dependencies let these errors
    propagate unchanged, so the innermost failure reaches the original caller.
    """


class UnknownBindingError(ResolutionError):
    """Signal that a key has no binding after alias resolution.

    Typical fixes include registering the key in a provider's ``register``
    phase, or checking the alias target for typos.
    """

    def __init__(self, key: str, requested: str | None = None) -> None:
        self.key = key
        self.requested = requested if requested is not None else key
        if self.requested != key:
            msg = f"No binding registered for {key!r} (requested as {self.requested!r})."
        else:
            msg = f"No binding registered for {key!r}."
        super().__init__(msg)


class AliasCycleError(ResolutionError):
    """Signal an alias chain that loops or exceeds the configured depth."""

    def __init__(self, chain: Sequence[str]) -> None:
        self.chain = list(chain)
        super().__init__(f"Alias chain is too deep or cyclic: {' -> '.join(self.chain)}")


class CircularDependencyError(ResolutionError):
    """Signal that a recipe transitively requested its own key.

    ``cycle`` starts and ends with the key that was requested twice.
    """

    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle = list(cycle)
        super().__init__(f"Circular dependency detected: {' -> '.join(self.cycle)}")


class RecipeConstructionError(ResolutionError):
    """Wrap an exception raised inside a binding recipe.

    Singleton values are never cached when this error is raised. The original
    exception is available as ``cause`` and as ``__cause__``.
    """

    def __init__(self, key: str, cause: BaseException) -> None:
        self.key = key
        self.cause = cause
        super().__init__(f"Recipe for {key!r} failed: {cause!r}")


class ProviderStartupError(BindwireError):
    """Signal that a provider failed while the application was starting.

    Startup failures are fatal: the application should not go on to serve
    requests. Partially booted state is not rolled back.
    """

    def __init__(self, provider_id: str, phase: str, cause: BaseException) -> None:
        self.provider_id = provider_id
        self.phase = phase
        self.cause = cause
        super().__init__(f"Provider {provider_id!r} failed during {phase}: {cause!r}")


class LifecycleStateError(BindwireError):
    """Signal a provider lifecycle phase entered out of order."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Provider lifecycle must be {expected}, but it is {actual}.")


class ContextGetterError(BindwireError):
    """Signal that a cached context getter failed to compute its value.

    The value is not memoized, so a later access retries the factory.
    """

    def __init__(self, name: str, cause: BaseException) -> None:
        self.name = name
        self.cause = cause
        super().__init__(f"Context getter {name!r} failed: {cause!r}")
