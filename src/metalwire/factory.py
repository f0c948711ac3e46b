from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, TypeVar

from metalwire.exceptions import MetalwireInstantiationError
from metalwire.object import ContainerObject

if TYPE_CHECKING:
    from metalwire.container import Container

T = TypeVar("T")


class Factory(Generic[T]):
    """Wrap a container entry together with a ``create()`` that wires new instances.

    ``Container.lookup`` uses factories internally. Fetch one with
    ``Container.factory_for`` when you need to control instantiation yourself,
    for example to pass constructor arguments to a model class while still
    getting its injections applied.
    """

    __slots__ = ("_cls", "_container", "_specifier")

    def __init__(self, specifier: str, cls: Any, container: Container) -> None:
        self._specifier = specifier
        self._cls = cls
        self._container = container

    @property
    def specifier(self) -> str:
        return self._specifier

    @property
    def cls(self) -> Any:
        """The resolved class (or value) this factory builds."""
        return self._cls

    def create(self, *args: Any, **kwargs: Any) -> T:
        """Build a new instance and apply injections.

        The constructor receives ``args``/``kwargs``. Once injections are in
        place, an ``init`` method on the instance is called with the same
        arguments.

        Raises:
            MetalwireInstantiationError: If the entry is not callable.

        """
        if not callable(self._cls):
            raise MetalwireInstantiationError(self._specifier)

        instance = self._cls(*args, **kwargs)
        if instance is None:
            return instance
        if isinstance(instance, ContainerObject):
            instance.container = self._container
        self._container.apply_injections(instance, from_factory=True)

        init = getattr(instance, "init", None)
        if callable(init):
            init(*args, **kwargs)
        return instance

    def __repr__(self) -> str:
        return f"Factory({self._specifier!r}, {self._cls!r})"
