import logging

from bindwire.aliases import AliasTable
from bindwire.application import Application
from bindwire.bindings import Binding, BindingRegistry, Lifetime
from bindwire.container import Container
from bindwire.context import Context, ContextExtension, ContextGetterSpec
from bindwire.exceptions import (
    AliasCycleError,
    BindwireError,
    CircularDependencyError,
    ContextGetterError,
    InvalidRegistrationError,
    LifecycleStateError,
    ProviderStartupError,
    RecipeConstructionError,
    ResolutionError,
    UnknownBindingError,
)
from bindwire.keys import APPLICATION, CONTAINER, SETTINGS, TypedKey
from bindwire.providers import LifecyclePhase, Provider, ProviderLifecycle, ServiceProvider
from bindwire.settings import ContainerSettings

__all__ = [
    "APPLICATION",
    "CONTAINER",
    "SETTINGS",
    "AliasCycleError",
    "AliasTable",
    "Application",
    "Binding",
    "BindingRegistry",
    "BindwireError",
    "CircularDependencyError",
    "Container",
    "ContainerSettings",
    "Context",
    "ContextExtension",
    "ContextGetterError",
    "ContextGetterSpec",
    "InvalidRegistrationError",
    "LifecycleStateError",
    "Lifetime",
    "Provider",
    "ProviderLifecycle",
    "ProviderStartupError",
    "RecipeConstructionError",
    "ResolutionError",
    "ServiceProvider",
    "TypedKey",
    "UnknownBindingError",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
