"""Settings: configure the container from ``BINDWIRE_*`` environment variables.

``ContainerSettings`` is a pydantic-settings model. Pass an instance
explicitly, or let the container read the environment.
"""

from __future__ import annotations

import os

from bindwire import SETTINGS, AliasCycleError, Container, ContainerSettings


def main() -> None:
    os.environ["BINDWIRE_MAX_ALIAS_DEPTH"] = "2"
    container = Container()
    print(f"max_alias_depth={container.settings.max_alias_depth}")  # => max_alias_depth=2

    container.bind("k0", lambda c: "value")
    container.alias("k1", "k0")
    container.alias("k2", "k1")
    container.alias("k3", "k2")
    print(f"two_hops={container.resolve('k2')}")  # => two_hops=value
    try:
        container.resolve("k3")
    except AliasCycleError as error:
        print(f"too_deep={len(error.chain)}")  # => too_deep=4

    explicit = Container(ContainerSettings(max_alias_depth=5))
    print(f"explicit={explicit.resolve(SETTINGS).max_alias_depth}")  # => explicit=5


if __name__ == "__main__":
    main()
