from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import pytest

from bindwire.application import Application
from bindwire.bindings import Lifetime, Recipe
from bindwire.keys import TypedKey
from bindwire.settings import ContainerSettings

FakeBinding = Callable[..., None]


@pytest.fixture()
def bindwire_app() -> Application:
    """Create a per-test application with default settings.

    Override this fixture to run providers before a test uses the application.

    Returns:
        A new ``Application`` whose providers have not been run.

    """
    return Application(settings=ContainerSettings())


@pytest.fixture()
def bindwire_fake(bindwire_app: Application) -> Iterator[FakeBinding]:
    """Fake bindings of ``bindwire_app`` for the duration of one test.

    Yields a callable with the signature of ``Container.fake``. Every fake is
    restored at teardown.

    Examples:
        .. code-block:: python

            def test_uses_fake_mailer(bindwire_app, bindwire_fake) -> None:
                bindwire_fake("mailer", lambda container: FakeMailer())
                assert isinstance(bindwire_app.container.resolve("mailer"), FakeMailer)

    """
    container = bindwire_app.container

    def _fake(
        key: str | TypedKey[Any],
        recipe: Recipe,
        lifetime: Lifetime = Lifetime.TRANSIENT,
    ) -> None:
        container.fake(key, recipe, lifetime)

    try:
        yield _fake
    finally:
        container.restore_all()
