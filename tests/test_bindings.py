"""Tests for BindingRegistry and AliasTable."""

import pytest

from bindwire.aliases import AliasTable
from bindwire.bindings import Binding, BindingRegistry, Lifetime
from bindwire.exceptions import UnknownBindingError


def _recipe(container: object) -> object:
    return object()


class TestBindingRegistry:
    def test_register_and_get(self) -> None:
        registry = BindingRegistry()

        previous = registry.register("db", _recipe, Lifetime.SINGLETON)

        assert previous is None
        binding = registry.get("db")
        assert binding.key == "db"
        assert binding.recipe is _recipe
        assert binding.lifetime is Lifetime.SINGLETON
        assert not binding.is_cached

    def test_has(self) -> None:
        registry = BindingRegistry()
        registry.register("db", _recipe, Lifetime.TRANSIENT)

        assert registry.has("db")
        assert not registry.has("cache")

    def test_get_missing_raises_unknown_binding(self) -> None:
        registry = BindingRegistry()

        with pytest.raises(UnknownBindingError) as exc_info:
            registry.get("missing")

        assert exc_info.value.key == "missing"
        assert registry.find("missing") is None

    def test_reregistration_overwrites_and_returns_previous(self) -> None:
        registry = BindingRegistry()
        registry.register("db", _recipe, Lifetime.SINGLETON)
        first = registry.get("db")
        first.cache("value")

        def other(container: object) -> str:
            return "other"

        previous = registry.register("db", other, Lifetime.TRANSIENT)

        assert previous is first
        replacement = registry.get("db")
        assert replacement.recipe is other
        assert replacement.lifetime is Lifetime.TRANSIENT
        assert not replacement.is_cached
        assert len(registry) == 1

    def test_put_keeps_cached_value_and_remove_drops(self) -> None:
        registry = BindingRegistry()
        binding = Binding(key="db", recipe=_recipe, lifetime=Lifetime.SINGLETON)
        binding.cache("connection")

        registry.put(binding)
        assert registry.get("db").cached_value == "connection"

        assert registry.remove("db") is binding
        assert registry.remove("db") is None
        assert registry.keys() == []


class TestBinding:
    def test_transient_never_caches(self) -> None:
        binding = Binding(key="token", recipe=_recipe, lifetime=Lifetime.TRANSIENT)

        binding.cache("value")

        assert not binding.is_cached

    def test_singleton_caches_only_first_value(self) -> None:
        binding = Binding(key="db", recipe=_recipe, lifetime=Lifetime.SINGLETON)

        binding.cache(None)
        binding.cache("second")

        assert binding.is_cached
        assert binding.cached_value is None


class TestAliasTable:
    def test_unaliased_name_passes_through(self) -> None:
        table = AliasTable()

        assert table.resolve_alias("db") == "db"
        assert not table.is_alias("db")

    def test_alias_target_is_not_validated(self) -> None:
        table = AliasTable()

        previous = table.alias("cache", "not-registered-yet")

        assert previous is None
        assert table.resolve_alias("cache") == "not-registered-yet"

    def test_resolve_alias_follows_one_hop(self) -> None:
        table = AliasTable()
        table.alias("a", "b")
        table.alias("b", "c")

        assert table.resolve_alias("a") == "b"
        assert table.items() == [("a", "b"), ("b", "c")]

    def test_realias_overwrites(self) -> None:
        table = AliasTable()
        table.alias("cache", "db")

        previous = table.alias("cache", "redis")

        assert previous == "db"
        assert table.resolve_alias("cache") == "redis"
        assert len(table) == 1
