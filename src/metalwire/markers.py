from __future__ import annotations

import inspect
from typing import Any
from weakref import WeakKeyDictionary

_DECLARED_INJECTIONS: WeakKeyDictionary[type[Any], dict[str, str]] = WeakKeyDictionary()


class Injection:
    """Placeholder for a dependency the container resolves while building an object.

    Create markers with ``inject()``. A marker holds a specifier only; it is
    replaced in place by ``Container.apply_injections`` with the result of
    ``Container.lookup(marker.lookup)``.

    Examples:
        .. code-block:: python

            class Mailer:
                logger = inject("app:logger")

                def __init__(self) -> None:
                    self.transport = inject("service:smtp")

    """

    __slots__ = ("lookup", "name")

    def __init__(self, lookup: str) -> None:
        self.lookup = lookup
        self.name: str | None = None

    def __set_name__(self, owner: type[Any], name: str) -> None:
        self.name = name
        _DECLARED_INJECTIONS.setdefault(owner, {})[name] = self.lookup

    def __repr__(self) -> str:
        return f"inject({self.lookup!r})"


def inject(lookup: str) -> Any:
    """Declare a dependency to be looked up when the owning object is built.

    Typed as ``Any`` so ``logger: Logger = inject("app:logger")`` type checks.

    Args:
        lookup: Specifier of the dependency, for example ``"service:mailer"``.

    """
    return Injection(lookup)


def is_injection(value: object) -> bool:
    """Return True when value is an injection marker."""
    return isinstance(value, Injection)


def declared_injections(cls: type[Any]) -> dict[str, str]:
    """Return markers declared in class bodies along the MRO, keyed by attribute name.

    Declarations survive class-level injection replacing the attribute value.
    A subclass that redefines the attribute with a plain value drops it.
    """
    declared: dict[str, str] = {}
    for klass in reversed(cls.__mro__):
        own = _DECLARED_INJECTIONS.get(klass, {})
        for name in list(declared):
            if name in klass.__dict__ and name not in own:
                del declared[name]
        declared.update(own)
    return declared


def find_injections(target: object) -> dict[str, str]:
    """Scan a class or an instance for injection points.

    For a class this covers declared markers plus markers assigned to the class
    after its body ran. For an instance, attributes stored on the instance
    itself take precedence over the class level.
    """
    owner = target if isinstance(target, type) else type(target)
    found = declared_injections(owner)
    for name in dir(owner):
        value = inspect.getattr_static(owner, name, None)
        if isinstance(value, Injection):
            found[name] = value.lookup

    if not isinstance(target, type):
        for name, value in (getattr(target, "__dict__", None) or {}).items():
            if isinstance(value, Injection):
                found[name] = value.lookup
            else:
                found.pop(name, None)
    return found
