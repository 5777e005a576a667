import logging

import pytest

from bindwire.context import Context, ContextExtension, ContextGetterSpec, ContextMemo
from bindwire.exceptions import ContextGetterError, InvalidRegistrationError


class RawRequest:
    def __init__(self, url: str) -> None:
        self.url = url


class Request:
    def __init__(self, raw: RawRequest) -> None:
        self.raw = raw


@pytest.fixture()
def context_type() -> type[Context]:
    class RequestContext(Context):
        pass

    return RequestContext


class TestContextExtension:
    def test_define_and_find(self) -> None:
        extension = ContextExtension()

        spec = extension.define("request", lambda ctx: None, cached=True)

        assert isinstance(spec, ContextGetterSpec)
        assert extension.find("request") is spec
        assert extension.find("response") is None

    def test_redefinition_overwrites(self) -> None:
        extension = ContextExtension()
        extension.define("request", lambda ctx: 1)

        replacement = extension.define("request", lambda ctx: 2, cached=True)

        assert extension.find("request") is replacement
        assert extension.names() == ["request"]

    def test_redefinition_warning_is_opt_in(self, caplog: pytest.LogCaptureFixture) -> None:
        extension = ContextExtension()
        extension.warn_on_override = True
        extension.define("request", lambda ctx: 1)

        with caplog.at_level(logging.WARNING, logger="bindwire.context"):
            extension.define("request", lambda ctx: 2)

        assert "Overriding existing context getter 'request'" in caplog.text

    def test_lookup_falls_back_to_parent(self) -> None:
        parent = ContextExtension()
        child = ContextExtension(parent=parent)
        inherited = parent.define("request", lambda ctx: "parent")
        child.define("response", lambda ctx: "child")

        assert child.find("request") is inherited
        assert parent.find("response") is None
        assert child.names() == ["request", "response"]

    @pytest.mark.parametrize("name", ["", "_private", "not an identifier", "1st"])
    def test_invalid_names_are_rejected(self, name: str) -> None:
        with pytest.raises(InvalidRegistrationError):
            ContextExtension().define(name, lambda ctx: None)

    def test_factory_must_be_callable(self) -> None:
        with pytest.raises(InvalidRegistrationError):
            ContextExtension().define("request", "nope")  # type: ignore[arg-type]


class TestContext:
    def test_attributes_are_stored(self, context_type: type[Context]) -> None:
        raw = RawRequest("/users")

        ctx = context_type(req=raw, res=None)

        assert ctx.req is raw
        assert ctx.res is None

    def test_cached_getter_is_computed_once_per_instance(
        self,
        context_type: type[Context],
    ) -> None:
        calls: list[Context] = []

        def make_request(ctx: Context) -> Request:
            calls.append(ctx)
            return Request(ctx.req)

        context_type.define_property("request", make_request, cached=True)
        ctx = context_type(req=RawRequest("/users"))

        assert not ctx.is_materialized("request")
        first = ctx.request
        second = ctx.request

        assert first is second
        assert first.raw.url == "/users"
        assert calls == [ctx]
        assert ctx.is_materialized("request")

    def test_cached_values_are_not_shared_between_instances(
        self,
        context_type: type[Context],
    ) -> None:
        context_type.define_property("request", lambda ctx: Request(ctx.req), cached=True)

        first = context_type(req=RawRequest("/a"))
        second = context_type(req=RawRequest("/b"))

        assert first.request is not second.request
        assert second.request.raw.url == "/b"

    def test_uncached_getter_runs_on_every_access(self, context_type: type[Context]) -> None:
        calls: list[int] = []

        def factory(ctx: Context) -> object:
            calls.append(1)
            return object()

        context_type.define_property("token", factory)
        ctx = context_type()

        assert ctx.token is not ctx.token
        assert len(calls) == 2
        assert not ctx.is_materialized("token")

    def test_cached_getter_failure_is_not_memoized(self, context_type: type[Context]) -> None:
        attempts: list[int] = []

        def flaky(ctx: Context) -> str:
            attempts.append(1)
            if len(attempts) == 1:
                raise ValueError("not yet")
            return "ready"

        context_type.define_property("value", flaky, cached=True)
        ctx = context_type()

        with pytest.raises(ContextGetterError) as exc_info:
            ctx.value

        assert exc_info.value.name == "value"
        assert isinstance(exc_info.value.cause, ValueError)
        assert not ctx.is_materialized("value")
        assert ctx.value == "ready"
        assert ctx.value == "ready"
        assert len(attempts) == 2

    def test_cached_getter_interrupt_propagates_and_allows_retry(
        self,
        context_type: type[Context],
    ) -> None:
        class Interrupt(BaseException):
            pass

        attempts: list[int] = []

        def interrupted_once(ctx: Context) -> str:
            attempts.append(1)
            if len(attempts) == 1:
                raise Interrupt
            return "ready"

        context_type.define_property("value", interrupted_once, cached=True)
        ctx = context_type()

        with pytest.raises(Interrupt):
            ctx.value

        assert not ctx.is_materialized("value")
        assert ctx.value == "ready"
        assert len(attempts) == 2

    def test_uncached_getter_failure_propagates_unwrapped(
        self,
        context_type: type[Context],
    ) -> None:
        def broken(ctx: Context) -> None:
            raise KeyError("session")

        context_type.define_property("session", broken)
        ctx = context_type()

        with pytest.raises(KeyError):
            ctx.session
        with pytest.raises(KeyError):
            ctx.session

    def test_cached_getter_reentry_fails_instead_of_deadlocking(
        self,
        context_type: type[Context],
    ) -> None:
        context_type.define_property("loop", lambda ctx: ctx.loop, cached=True)
        ctx = context_type()

        with pytest.raises(ContextGetterError) as exc_info:
            ctx.loop

        assert exc_info.value.name == "loop"

    def test_getter_may_use_other_getters(self, context_type: type[Context]) -> None:
        context_type.define_property("request", lambda ctx: Request(ctx.req), cached=True)
        context_type.define_property("url", lambda ctx: ctx.request.raw.url)

        ctx = context_type(req=RawRequest("/orders"))

        assert ctx.url == "/orders"

    def test_plain_attribute_shadows_getter(self, context_type: type[Context]) -> None:
        context_type.define_property("req", lambda ctx: "from getter")

        assert context_type(req="raw").req == "raw"
        assert context_type().req == "from getter"

    @pytest.mark.parametrize("name", ["is_materialized", "define_property", "extension"])
    def test_names_taken_by_the_context_type_are_rejected(
        self,
        context_type: type[Context],
        name: str,
    ) -> None:
        with pytest.raises(InvalidRegistrationError, match=name):
            context_type.define_property(name, lambda ctx: "getter")

        assert context_type.extension.find(name) is None

    def test_names_taken_by_a_custom_base_are_rejected(self) -> None:
        class SessionContext(Context):
            def user(self) -> str:
                return "method"

        with pytest.raises(InvalidRegistrationError, match="user"):
            SessionContext.define_property("user", lambda ctx: "getter")

        assert SessionContext().user() == "method"

    def test_getter_may_be_redefined(self, context_type: type[Context]) -> None:
        context_type.define_property("token", lambda ctx: "first")
        context_type.define_property("token", lambda ctx: "second")

        assert context_type().token == "second"

    def test_unknown_attribute_raises_attribute_error(self, context_type: type[Context]) -> None:
        ctx = context_type()

        with pytest.raises(AttributeError, match="missing"):
            ctx.missing
        assert not hasattr(ctx, "_private")

    def test_getters_do_not_leak_between_context_types(self) -> None:
        class First(Context):
            pass

        class Second(Context):
            pass

        First.define_property("only_first", lambda ctx: 1)

        assert First().only_first == 1
        assert not hasattr(Second(), "only_first")
        assert Context.extension.find("only_first") is None

    def test_subclass_inherits_parent_getters(self, context_type: type[Context]) -> None:
        context_type.define_property("request", lambda ctx: "parent request")

        class Child(context_type):  # type: ignore[valid-type,misc]
            pass

        Child.define_property("response", lambda ctx: "child response")

        ctx = Child()
        assert ctx.request == "parent request"
        assert ctx.response == "child response"
        assert "response" in dir(ctx)
        assert not hasattr(context_type(), "response")


class TestContextMemo:
    def test_get_or_compute_memoizes(self) -> None:
        memo = ContextMemo()
        values = iter([1, 2])

        assert memo.get_or_compute("n", lambda: next(values)) == 1
        assert memo.get_or_compute("n", lambda: next(values)) == 1
        assert memo.is_done("n")

    def test_none_is_a_valid_memoized_value(self) -> None:
        memo = ContextMemo()
        calls: list[int] = []

        def compute() -> None:
            calls.append(1)

        memo.get_or_compute("nothing", compute)
        memo.get_or_compute("nothing", compute)

        assert calls == [1]
