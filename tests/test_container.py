"""Tests for registration, lookup and lifecycle options."""

from __future__ import annotations

from typing import Any

import pytest

from metalwire import Container, Resolver
from metalwire.exceptions import MetalwireInvalidSpecifierError, MetalwireResolutionError


class Mailer:
    pass


class Post:
    pass


class TestRegister:
    def test_registers_a_value(self, container: Container) -> None:
        container.register("foo:bar", {"buzz": True})

        assert container.lookup("foo:bar")["buzz"] is True

    def test_overwrites_previous_registration(self, container: Container) -> None:
        container.register("foo:bar", "first")
        container.register("foo:bar", "second")

        assert container.lookup("foo:bar") == "second"

    def test_options_apply_to_exact_specifier(self, container: Container) -> None:
        container.register("foo:bar", Mailer, {"instantiate": True})

        assert container.get_option("foo:bar", "instantiate") is True
        assert container.get_option("foo:other", "instantiate") is False

    def test_does_not_invalidate_cached_lookups(self, container: Container) -> None:
        container.register("foo:bar", "first")
        assert container.lookup("foo:bar") == "first"

        container.register("foo:bar", "second")

        assert container.lookup("foo:bar") == "first"

    def test_does_not_instantiate_lazily_registered_classes(self, container: Container) -> None:
        class Exploding:
            def __init__(self) -> None:
                pytest.fail("Class should not have been instantiated.")

        container.register("service:exploding", Exploding)

    def test_rejects_malformed_specifier(self, container: Container) -> None:
        with pytest.raises(MetalwireInvalidSpecifierError):
            container.register("service", Mailer)

    def test_registrations_is_read_only_view(self, container: Container) -> None:
        container.register("foo:bar", Mailer)

        assert container.registrations == {"foo:bar": Mailer}
        with pytest.raises(TypeError):
            container.registrations["foo:baz"] = Post  # type: ignore[index]


class TestLookup:
    def test_singleton_instance_is_stable(self, container: Container) -> None:
        container.register("service:mailer", Mailer, {"singleton": True, "instantiate": True})

        first = container.lookup("service:mailer")
        second = container.lookup("service:mailer")

        assert isinstance(first, Mailer)
        assert second is first

    def test_non_singleton_returns_fresh_instances(self, container: Container) -> None:
        container.register("action:create", Mailer, {"singleton": False, "instantiate": True})

        first = container.lookup("action:create")
        second = container.lookup("action:create")

        assert isinstance(first, Mailer)
        assert isinstance(second, Mailer)
        assert first is not second

    def test_class_entries_are_returned_as_is(self, container: Container) -> None:
        container.register("model:post", Post, {"singleton": False, "instantiate": False})

        assert container.lookup("model:post") is Post
        assert container.lookup("model:post") is Post

    def test_singleton_class_entry_is_cached(self, bare_container: Container) -> None:
        bare_container.register("config:environment", Post)

        assert bare_container.lookup("config:environment") is Post
        bare_container.unregister("config:environment")
        bare_container.register("config:environment", Mailer)

        # unregister cleared the cache, so the new registration shows up
        assert bare_container.lookup("config:environment") is Mailer

    def test_registered_instance_is_its_own_singleton(self, container: Container) -> None:
        instance = Mailer()
        container.register("foo:bar", instance)

        assert container.lookup("foo:bar") is instance
        assert container.lookup("foo:bar") is instance

    def test_missing_entry_raises(self, container: Container) -> None:
        with pytest.raises(MetalwireResolutionError) as exc_info:
            container.lookup("nonexistent:thing")

        assert exc_info.value.specifier == "nonexistent:thing"
        assert "nonexistent:thing" in str(exc_info.value)

    def test_missing_entry_is_none_when_loose(self, container: Container) -> None:
        assert container.lookup("nonexistent:thing", loose=True) is None

    def test_resolution_error_is_a_lookup_error(self, container: Container) -> None:
        with pytest.raises(LookupError):
            container.lookup("missing:thing")

    def test_malformed_specifier_raises_even_when_loose(self, container: Container) -> None:
        with pytest.raises(MetalwireInvalidSpecifierError):
            container.lookup("service:None", loose=True)

    def test_constructor_returning_none_is_not_cached(self, bare_container: Container) -> None:
        calls: list[int] = []

        def build() -> None:
            calls.append(1)

        bare_container.register("service:nothing", build, {"instantiate": True, "singleton": True})

        assert bare_container.lookup("service:nothing") is None
        assert bare_container.lookup("service:nothing") is None
        assert len(calls) == 2


class TestBuiltInTypeOptions:
    @pytest.mark.parametrize(
        ("type_name", "singleton", "instantiate"),
        [
            ("action", False, True),
            ("config", True, False),
            ("initializer", True, False),
            ("orm-adapter", True, True),
            ("model", False, False),
            ("serializer", True, True),
            ("service", True, True),
            ("unknown", True, False),
        ],
    )
    def test_type_defaults(
        self,
        container: Container,
        type_name: str,
        singleton: bool,
        instantiate: bool,
    ) -> None:
        assert container.get_option(f"{type_name}:anything", "singleton") is singleton
        assert container.get_option(f"{type_name}:anything", "instantiate") is instantiate

    def test_service_is_a_lazy_singleton(self, container: Container) -> None:
        container.register("service:mailer", Mailer)

        mailer = container.lookup("service:mailer")

        assert isinstance(mailer, Mailer)
        assert container.lookup("service:mailer") is mailer

    def test_custom_type_options_replace_defaults(self) -> None:
        container = Container(type_options={"widget": {"singleton": False, "instantiate": True}})

        assert container.get_option("widget:a", "instantiate") is True
        assert container.get_option("service:a", "instantiate") is False


class TestOptions:
    def test_specifier_override_leaves_siblings_alone(self, container: Container) -> None:
        container.register("service:mailer", Mailer)
        container.register("service:other", Post)
        container.set_option("service:mailer", "singleton", False)
        container.set_option("service:mailer", "instantiate", True)

        assert container.lookup("service:mailer") is not container.lookup("service:mailer")
        assert container.lookup("service:other") is container.lookup("service:other")

    def test_type_option_applies_to_all_entries(self, bare_container: Container) -> None:
        bare_container.set_option("widget", "instantiate", True)
        bare_container.register("widget:a", Mailer)

        assert isinstance(bare_container.lookup("widget:a"), Mailer)

    def test_partial_specifier_entry_falls_through_per_key(self) -> None:
        container = Container(type_options={"widget": {"singleton": False, "instantiate": True}})
        container.register("widget:a", Mailer, {"singleton": True})

        # the seeded entry pins instantiate to False for this specifier
        assert container.get_option("widget:a", "instantiate") is False
        assert container.get_option("widget:a", "singleton") is True

    def test_first_set_option_pins_the_other_option_to_false(
        self,
        bare_container: Container,
    ) -> None:
        assert bare_container.get_option("foo:bar", "singleton") is True

        bare_container.set_option("foo:bar", "instantiate", True)

        assert bare_container.get_option("foo:bar", "singleton") is False

    def test_get_option_accepts_bare_type(self, container: Container) -> None:
        assert container.get_option("service", "instantiate") is True


class TestResolverChain:
    def test_registration_wins_over_resolver(self, resolver: Resolver) -> None:
        class FromResolver:
            pass

        resolver.register("service:mailer", FromResolver)
        container = Container(resolver)
        container.register("service:mailer", Mailer)

        assert isinstance(container.lookup("service:mailer"), Mailer)

    def test_first_resolver_wins(self) -> None:
        class LocalError:
            pass

        class AddonError:
            pass

        local, addon = Resolver(), Resolver()
        local.register("serializer:error", LocalError)
        addon.register("serializer:error", AddonError)
        container = Container(local)
        container.add_resolver(addon)

        assert isinstance(container.lookup("serializer:error"), LocalError)
        assert container.resolvers == (local, addon)

    def test_falsy_resolver_result_falls_through(self) -> None:
        class EmptyResolver(Resolver):
            def retrieve_serializer(self, type_name: str, name: str) -> Any:
                return ""

        addon = Resolver()
        addon.register("serializer:post", Post)
        container = Container(EmptyResolver(), addon)

        assert isinstance(container.lookup("serializer:post"), Post)

    def test_falsy_resolver_results_are_not_found(self) -> None:
        class ZeroResolver(Resolver):
            def retrieve_other(self, type_name: str, name: str) -> Any:
                return 0

        container = Container(ZeroResolver())

        assert container.lookup("config:retries", loose=True) is None

    def test_later_resolver_fills_gaps(self) -> None:
        local, addon = Resolver(), Resolver()
        addon.register("serializer:post", Post)
        container = Container(local, addon)

        assert isinstance(container.lookup("serializer:post"), Post)

    def test_resolved_class_is_memoized(self) -> None:
        calls: list[str] = []

        class CountingResolver(Resolver):
            def retrieve_model(self, type_name: str, name: str) -> Any:
                calls.append(name)
                return Post

        container = Container(CountingResolver())
        container.lookup("model:post")
        container.lookup("model:post")
        container.factory_for("model:post")

        assert calls == ["post"]

    def test_shared_resolver_keeps_containers_independent(self, resolver: Resolver) -> None:
        resolver.register("service:mailer", Mailer)
        first, second = Container(resolver), Container(resolver)

        assert first.lookup("service:mailer") is not second.lookup("service:mailer")
        assert type(first.lookup("service:mailer")) is type(second.lookup("service:mailer"))


class TestAvailableForType:
    def test_lists_registered_names(self, container: Container) -> None:
        for name in ("a", "b", "c", "d"):
            container.register(f"foo:{name}", {name: True})

        assert container.available_for_type("foo") == ["a", "b", "c", "d"]

    def test_ignores_types_sharing_a_prefix(self, container: Container) -> None:
        container.register("foo:a", 1)
        container.register("foobar:b", 2)

        assert container.available_for_type("foo") == ["a"]

    def test_merges_registrations_and_resolvers_in_order(self) -> None:
        local, addon = Resolver(), Resolver()
        local.register("foo:b", 2)
        local.register("foo:c", 3)
        addon.register("foo:c", 4)
        addon.register("foo:d", 5)
        container = Container(local, addon)
        container.register("foo:a", 1)
        container.register("foo:b", 6)

        assert container.available_for_type("foo") == ["a", "b", "c", "d"]

    def test_is_idempotent(self, container: Container) -> None:
        container.register("foo:a", 1)

        assert container.available_for_type("foo") == container.available_for_type("foo")


class TestLookupAll:
    def test_returns_entries_keyed_by_name(self, container: Container) -> None:
        container.register("foo:bar", {"buzz": True})
        container.register("foo:buzz", {"bat": True})

        entries = container.lookup_all("foo")

        assert entries == {"bar": {"buzz": True}, "buzz": {"bat": True}}

    def test_instantiates_every_entry(self, container: Container) -> None:
        class CommentSerializer:
            pass

        container.register("serializer:post", Post)
        container.register("serializer:comment", CommentSerializer)

        serializers = container.lookup_all("serializer")

        assert set(serializers) == {"post", "comment"}
        assert isinstance(serializers["post"], Post)
        assert isinstance(serializers["comment"], CommentSerializer)
        assert serializers["post"] is container.lookup("serializer:post")

    def test_empty_type(self, container: Container) -> None:
        assert container.lookup_all("nothing") == {}


class TestClearCache:
    def test_forces_resolution_again(self, resolver: Resolver) -> None:
        resolver.register("service:mailer", Mailer)
        container = Container(resolver)
        original = container.lookup("service:mailer")

        resolver.register("service:mailer", Post)
        assert container.lookup("service:mailer") is original

        container.clear_cache("service:mailer")

        assert isinstance(container.lookup("service:mailer"), Post)

    def test_keeps_registration_and_options(self, container: Container) -> None:
        container.register("foo:bar", Mailer, {"singleton": True, "instantiate": True})
        first = container.lookup("foo:bar")

        container.clear_cache("foo:bar")

        assert container.registrations["foo:bar"] is Mailer
        assert container.get_option("foo:bar", "instantiate") is True
        assert container.lookup("foo:bar") is not first

    def test_unknown_specifier_is_a_no_op(self, container: Container) -> None:
        container.clear_cache("foo:never")


class TestUnregister:
    def test_returns_removed_entry(self, container: Container) -> None:
        container.register("foo:bar", Mailer)

        assert container.unregister("foo:bar") is Mailer
        assert container.lookup("foo:bar", loose=True) is None

    def test_missing_registration_returns_none(self, container: Container) -> None:
        assert container.unregister("foo:bar") is None


class TestMetaFor:
    def test_returns_same_record(self, container: Container) -> None:
        record = container.meta_for(Post)
        record["cached"] = ["title"]

        assert container.meta_for(Post) is record
        assert container.meta_for(Post)["cached"] == ["title"]

    def test_records_are_per_container(self) -> None:
        first, second = Container(), Container()
        first.meta_for(Post)["value"] = 1

        assert "value" not in second.meta_for(Post)

    def test_keys_by_identity(self, container: Container) -> None:
        first_key: dict[str, int] = {}
        second_key: dict[str, int] = {}

        assert container.meta_for(first_key) is not container.meta_for(second_key)
        assert container.meta_for(first_key) is container.meta_for(first_key)

    def test_records_container_name_on_first_resolution(self, container: Container) -> None:
        container.register("serializer:blog-post", Post)

        container.factory_for("serializer:blog-post")

        assert container.meta_for(Post)["container_name"] == "blog-post"
