from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from bindwire.container import Container
from bindwire.context import Context
from bindwire.keys import APPLICATION
from bindwire.providers import Provider, ProviderLifecycle
from bindwire.settings import ContainerSettings

logger = logging.getLogger(__name__)


class Application:
    """Composition root owning a container, a context type and the provider lifecycle.

    Nothing here is process-global: each application has its own container and
    its own ``Context`` subclass, so getters defined while booting one
    application are invisible to another.

    Examples:
        .. code-block:: python

            app = Application()
            app.run_providers([AppProvider(app), LoggerProvider(app)])

            ctx = app.create_context(req=raw_request)
            ctx.request.url

    """

    def __init__(
        self,
        settings: ContainerSettings | None = None,
        context_type: type[Context] | None = None,
    ) -> None:
        """Initialize the application.

        Args:
            settings: Shared configuration, read from the environment by default.
            context_type: Base for the per-request context type. A private
                subclass of it is created for this application.

        """
        self.settings = settings if settings is not None else ContainerSettings()
        self.container = Container(self.settings)
        base = context_type if context_type is not None else Context
        self.context_type: type[Context] = type(f"Application{base.__name__}", (base,), {})
        self.context_type.extension.warn_on_override = self.settings.warn_on_override
        self.lifecycle = ProviderLifecycle()

        self.container.singleton(APPLICATION, lambda container: self)

    def run_providers(self, providers: Sequence[Provider]) -> None:
        """Register, then boot, ``providers`` in order.

        Raises:
            ProviderStartupError: If any provider fails. The application must
                not go on to serve requests.

        """
        self.lifecycle.run(providers)
        logger.info("Application booted with %d providers", len(providers))

    def create_context(self, **attributes: Any) -> Context:
        """Create a fresh per-request context instance."""
        return self.context_type(**attributes)
