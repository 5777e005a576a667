"""Errors: unknown keys, cycles, failing recipes and failing providers."""

from __future__ import annotations

from bindwire import (
    Application,
    CircularDependencyError,
    Container,
    ProviderStartupError,
    RecipeConstructionError,
    ServiceProvider,
    UnknownBindingError,
)


class BrokenProvider(ServiceProvider):
    name = "broken"

    def boot(self) -> None:
        self.container.resolve("app.mailer")


def main() -> None:
    container = Container()

    try:
        container.resolve("missing")
    except UnknownBindingError as error:
        print(f"unknown={error.key}")  # => unknown=missing

    container.bind("a", lambda c: c.resolve("b"))
    container.bind("b", lambda c: c.resolve("a"))
    try:
        container.resolve("a")
    except CircularDependencyError as error:
        print(f"cycle={' -> '.join(error.cycle)}")  # => cycle=a -> b -> a

    def broken_recipe(c: Container) -> None:
        raise OSError("config file not found")

    container.singleton("config", broken_recipe)
    try:
        container.resolve("config")
    except RecipeConstructionError as error:
        print(f"recipe={error.key}:{type(error.cause).__name__}")  # => recipe=config:OSError

    app = Application()
    try:
        app.run_providers([BrokenProvider(app)])
    except ProviderStartupError as error:
        print(f"startup={error.provider_id}:{error.phase}")  # => startup=broken:boot


if __name__ == "__main__":
    main()
