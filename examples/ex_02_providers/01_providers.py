"""Providers: register everything, then boot everything.

``run_providers`` calls ``register`` on every provider before any ``boot``.
A provider's ``boot`` can therefore resolve keys registered by providers
declared after it.
"""

from __future__ import annotations

from bindwire import Application, ServiceProvider

events: list[str] = []


class Logger:
    def __init__(self) -> None:
        self.lines: list[str] = []

    def info(self, line: str) -> None:
        self.lines.append(line)


class RouteProvider(ServiceProvider):
    def register(self) -> None:
        events.append("routes.register")
        self.container.singleton("app.routes", lambda c: ["/", "/users"])

    def boot(self) -> None:
        events.append("routes.boot")
        logger = self.container.resolve("Logger")
        for route in self.container.resolve("app.routes"):
            logger.info(f"route {route}")


class LoggerProvider(ServiceProvider):
    def register(self) -> None:
        events.append("logger.register")
        self.container.singleton("app.logger", lambda c: Logger())
        self.container.alias("Logger", "app.logger")

    def boot(self) -> None:
        events.append("logger.boot")


def main() -> None:
    app = Application()
    app.run_providers([RouteProvider(app), LoggerProvider(app)])

    print(f"registered={events[:2]}")  # => registered=['routes.register', 'logger.register']
    print(f"booted={events[2:]}")  # => booted=['routes.boot', 'logger.boot']

    logger = app.container.resolve("app.logger")
    print(f"logged={logger.lines}")  # => logged=['route /', 'route /users']
    print(f"phase={app.lifecycle.phase.value}")  # => phase=booted


if __name__ == "__main__":
    main()
