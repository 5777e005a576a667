from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from bindwire.exceptions import LifecycleStateError, ProviderStartupError

if TYPE_CHECKING:
    from bindwire.application import Application
    from bindwire.container import Container

logger = logging.getLogger(__name__)


@runtime_checkable
class Provider(Protocol):
    """A unit contributing bindings and cross-cutting setup.

    ``register`` must only add bindings and aliases. ``boot`` runs after every
    provider has registered, so it may resolve any key and define context
    getters.
    """

    def register(self) -> None: ...

    def boot(self) -> None: ...


class ServiceProvider:
    """Convenience base class for providers owned by an ``Application``.

    Override ``register`` and/or ``boot``; both default to doing nothing.

    Examples:
        .. code-block:: python

            class LoggerProvider(ServiceProvider):
                def register(self) -> None:
                    self.container.singleton("app.logger", lambda container: Logger())
                    self.container.alias("Logger", "app.logger")

    """

    name: str | None = None
    """Identifier used in startup errors. Defaults to the class name."""

    def __init__(self, app: Application) -> None:
        self.app = app

    @property
    def container(self) -> Container:
        return self.app.container

    def register(self) -> None:
        return None

    def boot(self) -> None:
        return None


def provider_id(provider: object) -> str:
    """Return the identifier used for ``provider`` in logs and errors."""
    name = getattr(provider, "name", None)
    if isinstance(name, str) and name:
        return name
    return type(provider).__name__


class LifecyclePhase(Enum):
    """States of the two-phase provider startup."""

    NOT_STARTED = "not started"
    REGISTERING = "registering"
    REGISTERED = "registered"
    BOOTING = "booting"
    BOOTED = "booted"
    FAILED = "failed"


class ProviderLifecycle:
    """Run ``register`` on every provider, then ``boot`` on every provider.

    The phases form a state machine
    (``NOT_STARTED -> REGISTERING -> REGISTERED -> BOOTING -> BOOTED``). Entering
    a phase out of order raises ``LifecycleStateError``. Any provider failure
    moves the lifecycle to ``FAILED`` and raises ``ProviderStartupError``;
    nothing that already ran is rolled back.

    A lifecycle runs once. Create a new one for a new application.
    """

    def __init__(self) -> None:
        self.phase = LifecyclePhase.NOT_STARTED
        self._providers: list[Provider] = []

    @property
    def providers(self) -> list[Provider]:
        return list(self._providers)

    def run(self, providers: Sequence[Provider]) -> None:
        """Register and then boot ``providers`` in the given order."""
        self.register(providers)
        self.boot()

    def register(self, providers: Sequence[Provider]) -> None:
        """Call ``register`` on every provider, in order.

        Raises:
            LifecycleStateError: If the lifecycle already started.
            ProviderStartupError: If any provider's ``register`` raised.

        """
        self._require(LifecyclePhase.NOT_STARTED)
        self._providers = list(providers)
        self._enter(LifecyclePhase.REGISTERING)
        for provider in self._providers:
            self._call(provider, "register")
        self._enter(LifecyclePhase.REGISTERED)

    def boot(self) -> None:
        """Call ``boot`` on every registered provider, in registration order.

        Raises:
            LifecycleStateError: If registration has not completed.
            ProviderStartupError: If any provider's ``boot`` raised.

        """
        self._require(LifecyclePhase.REGISTERED)
        self._enter(LifecyclePhase.BOOTING)
        for provider in self._providers:
            self._call(provider, "boot")
        self._enter(LifecyclePhase.BOOTED)

    def _call(self, provider: Provider, phase: str) -> None:
        pid = provider_id(provider)
        logger.debug("Running %s for provider %r", phase, pid)
        try:
            getattr(provider, phase)()
        except Exception as exc:
            self.phase = LifecyclePhase.FAILED
            logger.error("Provider %r failed during %s: %r", pid, phase, exc)
            raise ProviderStartupError(pid, phase, exc) from exc

    def _require(self, expected: LifecyclePhase) -> None:
        if self.phase is not expected:
            raise LifecycleStateError(expected.value, self.phase.value)

    def _enter(self, phase: LifecyclePhase) -> None:
        self.phase = phase
        logger.info("Provider lifecycle %s (%d providers)", phase.value, len(self._providers))
