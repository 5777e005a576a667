"""Context getters: lazy per-request properties contributed during boot.

Providers attach properties to the application's context type without the
context type knowing about them. Cached getters run once per context
instance; uncached getters run on every access.
"""

from __future__ import annotations

import itertools

from bindwire import Application, ServiceProvider


class Request:
    def __init__(self, raw: dict[str, str]) -> None:
        self.path = raw["path"]


class HttpProvider(ServiceProvider):
    def boot(self) -> None:
        counter = itertools.count(1)
        self.app.context_type.define_property(
            "request",
            lambda ctx: Request(ctx.req),
            cached=True,
        )
        self.app.context_type.define_property("tick", lambda ctx: next(counter))


def main() -> None:
    app = Application()
    app.run_providers([HttpProvider(app)])

    ctx = app.create_context(req={"path": "/users"})
    print(f"materialized={ctx.is_materialized('request')}")  # => materialized=False
    print(f"path={ctx.request.path}")  # => path=/users
    print(f"cached_same={ctx.request is ctx.request}")  # => cached_same=True
    print(f"ticks={ctx.tick},{ctx.tick}")  # => ticks=1,2

    other = app.create_context(req={"path": "/orders"})
    print(f"per_request={other.request is not ctx.request}")  # => per_request=True


if __name__ == "__main__":
    main()
