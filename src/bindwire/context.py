from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, ClassVar, TypeAlias

from bindwire.exceptions import ContextGetterError, InvalidRegistrationError

logger = logging.getLogger(__name__)

GetterFactory: TypeAlias = Callable[[Any], Any]
"""A callable that receives the owning context instance and returns the property value."""


@dataclass(frozen=True, slots=True)
class ContextGetterSpec:
    """A named, lazily computed property contributed to a context type."""

    name: str
    factory: GetterFactory
    cached: bool = False


class ContextExtension:
    """Registry of lazy getters attachable to a context type.

    Lookups fall back to ``parent`` so a context subclass sees the getters of
    the type it extends, while its own definitions stay private to it.
    """

    def __init__(self, parent: ContextExtension | None = None) -> None:
        self.parent = parent
        self.warn_on_override = False
        self._getters: dict[str, ContextGetterSpec] = {}

    def define(
        self,
        name: str,
        factory: GetterFactory,
        *,
        cached: bool = False,
    ) -> ContextGetterSpec:
        """Register a getter, replacing any getter already defined under ``name``.

        Args:
            name: Attribute name the getter is exposed under.
            factory: Callable receiving the context instance.
            cached: Compute once per context instance when true.

        Raises:
            InvalidRegistrationError: If the name is not a public identifier or
                the factory is not callable.

        """
        if not isinstance(name, str) or not name.isidentifier() or name.startswith("_"):
            msg = f"Context getter name must be a public identifier, got {name!r}."
            raise InvalidRegistrationError(msg)
        if not callable(factory):
            msg = f"Factory for context getter {name!r} must be callable, got {factory!r}."
            raise InvalidRegistrationError(msg)

        spec = ContextGetterSpec(name=name, factory=factory, cached=cached)
        if name in self._getters:
            if self.warn_on_override:
                logger.warning("Overriding existing context getter %r", name)
            else:
                logger.debug("Overriding existing context getter %r", name)
        self._getters[name] = spec
        logger.debug("Defined %s context getter %r", "cached" if cached else "uncached", name)
        return spec

    def find(self, name: str) -> ContextGetterSpec | None:
        """Get the getter defined under ``name`` here or in a parent, if any."""
        spec = self._getters.get(name)
        if spec is None and self.parent is not None:
            return self.parent.find(name)
        return spec

    def names(self) -> list[str]:
        """Return every getter name visible through this extension."""
        inherited = self.parent.names() if self.parent is not None else []
        return [*inherited, *(name for name in self._getters if name not in inherited)]


class _GetterState(Enum):
    NOT_STARTED = auto()
    IN_PROGRESS = auto()
    DONE = auto()


class ContextMemo:
    """Per-instance memo for cached getters.

    Each name moves ``NOT_STARTED -> IN_PROGRESS -> DONE``. Accesses that find
    a name ``IN_PROGRESS`` wait for the computing access to finish. A failed
    computation moves the name back to ``NOT_STARTED``.
    """

    def __init__(self) -> None:
        self._condition = threading.Condition()
        self._values: dict[str, Any] = {}
        self._states: dict[str, _GetterState] = {}
        self._owners: dict[str, int] = {}

    def is_done(self, name: str) -> bool:
        with self._condition:
            return self._states.get(name) is _GetterState.DONE

    def get_or_compute(self, name: str, compute: Callable[[], Any]) -> Any:
        """Return the memoized value for ``name``, computing it at most once.

        Exceptions that are not ``Exception`` subclasses (``KeyboardInterrupt``,
        ``SystemExit``) are re-raised unchanged after the name is reset.

        Raises:
            ContextGetterError: If ``compute`` raised, or if it re-entered the
                same name on the computing thread.

        """
        thread_id = threading.get_ident()
        with self._condition:
            while self._states.get(name) is _GetterState.IN_PROGRESS:
                if self._owners.get(name) == thread_id:
                    cause = RecursionError(f"context getter {name!r} requested itself")
                    raise ContextGetterError(name, cause)
                self._condition.wait()
            if self._states.get(name) is _GetterState.DONE:
                return self._values[name]
            self._states[name] = _GetterState.IN_PROGRESS
            self._owners[name] = thread_id

        try:
            value = compute()
        except BaseException as exc:
            with self._condition:
                self._states[name] = _GetterState.NOT_STARTED
                self._owners.pop(name, None)
                self._condition.notify_all()
            if isinstance(exc, Exception):
                raise ContextGetterError(name, exc) from exc
            raise

        with self._condition:
            self._values[name] = value
            self._states[name] = _GetterState.DONE
            self._owners.pop(name, None)
            self._condition.notify_all()
        return value


class Context:
    """Per-request object whose properties are contributed by providers.

    Keyword arguments become plain attributes (for example the raw ``req`` and
    ``res`` of a request). Any other attribute is looked up in the type's
    ``ContextExtension`` and computed by its factory, once per instance for
    cached getters and on every access otherwise.

    Every subclass gets its own extension, so getters defined on an
    application's context type do not leak into other context types.

    Examples:
        .. code-block:: python

            class HttpContext(Context): ...


            HttpContext.define_property(
                "request",
                lambda ctx: Request(ctx.req),
                cached=True,
            )

            ctx = HttpContext(req=raw_request)
            assert ctx.request is ctx.request

    """

    extension: ClassVar[ContextExtension] = ContextExtension()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        parent = next(base.extension for base in cls.__mro__[1:] if issubclass(base, Context))
        cls.extension = ContextExtension(parent=parent)

    def __init__(self, **attributes: Any) -> None:
        self._memo = ContextMemo()
        for name, value in attributes.items():
            setattr(self, name, value)

    @classmethod
    def define_property(
        cls,
        name: str,
        factory: GetterFactory,
        cached: bool = False,  # noqa: FBT001, FBT002
    ) -> ContextGetterSpec:
        """Contribute a lazy property to every instance of this context type.

        Raises:
            InvalidRegistrationError: If ``name`` is already a regular attribute
                of this type, which would hide the getter.

        """
        if isinstance(name, str) and hasattr(cls, name) and cls.extension.find(name) is None:
            msg = f"Context getter {name!r} would be shadowed by {cls.__name__}.{name}."
            raise InvalidRegistrationError(msg)
        return cls.extension.define(name, factory, cached=cached)

    def is_materialized(self, name: str) -> bool:
        """Return whether the cached getter ``name`` has a memoized value here."""
        return self._memo.is_done(name)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        spec = type(self).extension.find(name)
        if spec is None:
            msg = f"{type(self).__name__!r} object has no attribute or context getter {name!r}"
            raise AttributeError(msg)
        if not spec.cached:
            return spec.factory(self)
        return self._memo.get_or_compute(name, lambda: spec.factory(self))

    def __dir__(self) -> list[str]:
        return sorted({*super().__dir__(), *type(self).extension.names()})
