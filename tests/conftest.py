"""Shared pytest fixtures for bindwire tests."""

import pytest

from bindwire.application import Application
from bindwire.container import Container
from bindwire.settings import ContainerSettings


@pytest.fixture()
def settings() -> ContainerSettings:
    """Settings isolated from BINDWIRE_* environment variables."""
    return ContainerSettings(max_alias_depth=10, warn_on_override=False)


@pytest.fixture()
def container(settings: ContainerSettings) -> Container:
    """Empty container apart from its built-in bindings."""
    return Container(settings)


@pytest.fixture()
def application(settings: ContainerSettings) -> Application:
    """Application whose providers have not been run."""
    return Application(settings)
