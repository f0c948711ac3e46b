from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from metalwire.container import Container

_INHERITED_META_KEY = "inherited"


class _ContainerObjectMeta(type):
    def __setattr__(cls, name: str, value: Any) -> None:
        if name == "container":
            msg = (
                "You tried to set a `container` attribute on a class directly. Classes are "
                "shared between containers, set it on instances instead."
            )
            raise AttributeError(msg)
        super().__setattr__(name, value)


class ContainerObject(metaclass=_ContainerObjectMeta):
    """Base class for objects built by a container.

    Instances created through ``Factory.create`` receive the owning container
    as ``self.container``. The class attribute stays ``None``.
    """

    container: Container | None = None


def collect_inherited(container: Container, cls: type[Any], attribute: str) -> tuple[Any, ...]:
    """Concatenate a list attribute declared at each level of ``cls.__mro__``.

    Base classes come first, so ``before = ["authenticate"]`` on a parent runs
    ahead of a child's own entries. The result is cached per class in
    ``container.meta_for(cls)``.

    Args:
        container: Container whose metadata map holds the cache.
        cls: Class to walk.
        attribute: Name of the class attribute holding a list, e.g. ``"before"``.

    """
    cache = container.meta_for(cls).setdefault(_INHERITED_META_KEY, {})
    if attribute not in cache:
        chain: list[Any] = []
        for klass in reversed(cls.__mro__):
            chain.extend(klass.__dict__.get(attribute) or ())
        cache[attribute] = tuple(chain)
    return cache[attribute]
