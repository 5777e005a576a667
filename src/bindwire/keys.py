from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from bindwire.application import Application
    from bindwire.container import Container
    from bindwire.settings import ContainerSettings

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class TypedKey(Generic[T]):
    """Attach a static type to a well-known string key.

    The container table stays open and string-keyed; ``TypedKey`` only lets
    type checkers infer what ``Container.resolve`` returns for keys that are
    known ahead of time.

    Examples:
        .. code-block:: python

            LOGGER: TypedKey[Logger] = TypedKey("app.logger")

            container.singleton(LOGGER, lambda container: Logger())
            logger = container.resolve(LOGGER)  # typed as Logger

    """

    name: str

    def __str__(self) -> str:
        return self.name


def key_name(key: str | TypedKey[Any]) -> str:
    """Return the string table key for a plain or typed key."""
    if isinstance(key, TypedKey):
        return key.name
    return key


CONTAINER: TypedKey[Container] = TypedKey("bindwire.container")
SETTINGS: TypedKey[ContainerSettings] = TypedKey("bindwire.settings")
APPLICATION: TypedKey[Application] = TypedKey("bindwire.application")
