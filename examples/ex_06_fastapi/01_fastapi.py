"""FastAPI: one bindwire context per request.

``setup_bindwire`` creates a context for every request. Endpoints read lazy
context getters through ``get_context`` and container values through
``Resolve``.
"""

from __future__ import annotations

from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from bindwire import Application, Context, ServiceProvider
from bindwire.integrations.fastapi import Resolve, get_context, setup_bindwire


class Greeter:
    def greet(self, name: str) -> str:
        return f"hello {name}"


class AppProvider(ServiceProvider):
    def register(self) -> None:
        self.container.singleton("app.greeter", lambda c: Greeter())

    def boot(self) -> None:
        self.app.context_type.define_property(
            "user_agent",
            lambda ctx: ctx.req.headers.get("user-agent", "unknown"),
            cached=True,
        )


def main() -> None:
    application = Application()
    application.run_providers([AppProvider(application)])

    app = FastAPI()
    setup_bindwire(app, application)

    @app.get("/greet/{name}")
    def greet(
        name: str,
        greeter: Greeter = Resolve("app.greeter"),
        ctx: Context = Depends(get_context),
    ) -> dict[str, str]:
        return {"message": greeter.greet(name), "agent": ctx.user_agent}

    client = TestClient(app)
    body = client.get("/greet/ada", headers={"user-agent": "demo"}).json()
    print(f"message={body['message']}")  # => message=hello ada
    print(f"agent={body['agent']}")  # => agent=demo


if __name__ == "__main__":
    main()
