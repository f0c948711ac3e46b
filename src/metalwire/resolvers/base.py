from __future__ import annotations

from typing import Any

from metalwire.specifiers import parse_specifier, split_type


def _method_suffix(type_name: str) -> str:
    return type_name.replace("-", "_")


class Resolver:
    """In-memory resolver with per-type lookup hooks.

    Entries added with ``register`` always win. Otherwise ``retrieve`` calls
    ``retrieve_<type>(type_name, name)`` when a subclass defines it (dashes in
    the type become underscores) and ``retrieve_other`` when it does not.
    ``available_for_type`` dispatches to ``available_for_<type>`` and
    ``available_for_other`` the same way.

    A plain ``Resolver`` doubles as a class registry that several containers
    can share while each keeps its own caches.

    Examples:
        .. code-block:: python

            class AppResolver(Resolver):
                def retrieve_serializer(self, type_name: str, name: str) -> Any:
                    return SERIALIZERS.get(name)

            shared = Resolver()
            shared.register("model:post", Post)
            first, second = Container(shared), Container(shared)

    """

    def __init__(self) -> None:
        self._registry: dict[str, Any] = {}

    def register(self, specifier: str, entry: Any) -> None:
        parse_specifier(specifier)
        self._registry[specifier] = entry

    def retrieve(self, specifier: str) -> Any:
        entry = self._registry.get(specifier)
        if entry is not None:
            return entry
        type_name, name = parse_specifier(specifier)
        method = getattr(self, f"retrieve_{_method_suffix(type_name)}", self.retrieve_other)
        return method(type_name, name)

    def retrieve_other(self, type_name: str, name: str) -> Any:
        """Fallback lookup for types without a dedicated ``retrieve_<type>`` method."""
        del type_name, name
        return None

    def available_for_type(self, type_name: str) -> list[str]:
        registered = [
            specifier for specifier in self._registry if split_type(specifier) == type_name
        ]
        method = getattr(
            self,
            f"available_for_{_method_suffix(type_name)}",
            self.available_for_other,
        )
        return list(dict.fromkeys([*registered, *method(type_name)]))

    def available_for_other(self, type_name: str) -> list[str]:
        del type_name
        return []

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
