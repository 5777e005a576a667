from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, cast

try:
    from fastapi import Depends, FastAPI, Request, Response
except ModuleNotFoundError as exc:  # pragma: no cover - exercised in optional import scenarios
    message = "FastAPI integration requires fastapi. Install with 'bindwire[fastapi]'."
    raise ModuleNotFoundError(message) from exc

from bindwire.context import Context

if TYPE_CHECKING:
    from bindwire.application import Application
    from bindwire.keys import TypedKey

_APPLICATION_STATE_ATTR = "bindwire_application"
_CONTEXT_STATE_ATTR = "bindwire_context"


def setup_bindwire(app: FastAPI, application: Application) -> None:
    """Create one bindwire context per request handled by ``app``.

    The context receives the Starlette request as ``req`` and is available as
    ``request.state.bindwire_context`` (or through ``get_context``) until the
    response has been produced. ``res`` is always ``None``: the response is
    built by the endpoint after the context exists, so getters can only read
    from the request side.

    Args:
        app: FastAPI application to configure.
        application: Booted bindwire application providing the container and
            the context type.

    """
    setattr(app.state, _APPLICATION_STATE_ATTR, application)

    @app.middleware("http")
    async def _bindwire_context_middleware(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        context = application.create_context(req=request, res=None)
        setattr(request.state, _CONTEXT_STATE_ATTR, context)
        try:
            return await call_next(request)
        finally:
            delattr(request.state, _CONTEXT_STATE_ATTR)


def _get_application(request: Request) -> Application:
    application = getattr(request.app.state, _APPLICATION_STATE_ATTR, None)
    if application is None:
        msg = "bindwire is not configured for this app. Call setup_bindwire(app, application)."
        raise RuntimeError(msg)
    return cast("Application", application)


def get_context(request: Request) -> Context:
    """FastAPI dependency returning the current request's context."""
    context = getattr(request.state, _CONTEXT_STATE_ATTR, None)
    if context is None:
        msg = "No bindwire context for this request. Call setup_bindwire(app, application)."
        raise RuntimeError(msg)
    return cast("Context", context)


def Resolve(key: str | TypedKey[Any]) -> Any:  # noqa: N802
    """FastAPI dependency resolving ``key`` from the application's container.

    Examples:
        .. code-block:: python

            @app.get("/health")
            def health(db: Database = Resolve("db")) -> dict[str, bool]:
                return {"ok": db.ping()}

    """

    def _resolve(request: Request) -> Any:
        return _get_application(request).container.resolve(key)

    return Depends(_resolve)


__all__ = ["Resolve", "get_context", "setup_bindwire"]
