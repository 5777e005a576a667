from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ContainerSettings(BaseSettings):
    """Configure container and lifecycle behavior.

    Values are read from ``BINDWIRE_*`` environment variables unless an
    explicit instance is passed to ``Container`` or ``Application``.

    Examples:
        .. code-block:: bash

            BINDWIRE_MAX_ALIAS_DEPTH=4 BINDWIRE_WARN_ON_OVERRIDE=true python app.py

    """

    model_config = SettingsConfigDict(env_prefix="BINDWIRE_", extra="ignore")

    max_alias_depth: int = Field(default=10, ge=1)
    """Maximum number of alias hops followed before ``AliasCycleError``."""

    warn_on_override: bool = False
    """Log a warning when a binding, alias or context getter is re-registered."""
