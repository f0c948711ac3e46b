from __future__ import annotations


class MetalwireError(Exception):
    """Represent a base class for all metalwire-specific failures.

    Catch this type when you want to handle any container error path without
    matching each concrete exception class individually.
    """


class MetalwireResolutionError(MetalwireError, LookupError):
    """Signal that no registration and no resolver produced a value for a specifier.

    Raised by ``Container.lookup`` and ``Container.factory_for`` in strict mode,
    and by any lookup of an injected dependency while an object is being built.

    Typical fixes include registering the entry with ``Container.register``,
    adding a resolver that knows about it, or passing ``loose=True`` when a
    missing entry is an expected outcome.
    """

    def __init__(self, specifier: str) -> None:
        self.specifier = specifier
        super().__init__(f"No class found for {specifier!r}")


class MetalwireInstantiationError(MetalwireError, TypeError):
    """Signal that a container entry cannot be instantiated.

    Raised by ``Factory.create`` (and therefore by ``lookup`` with
    ``instantiate=True``) when the entry is not a class or other callable.
    """

    def __init__(self, specifier: str) -> None:
        self.specifier = specifier
        super().__init__(
            f"Unable to instantiate {specifier!r} (it's not a constructor). Try setting the "
            "'instantiate=False' option on this container entry to avoid instantiating it.",
        )


class MetalwireInvalidSpecifierError(MetalwireError, ValueError):
    """Signal a malformed ``"type:name"`` specifier.

    A specifier needs a type and a name separated by ``:``. A name of
    ``"None"`` usually means an unset variable was formatted into the string.
    """

    def __init__(self, specifier: str, reason: str) -> None:
        self.specifier = specifier
        super().__init__(f"Invalid container specifier {specifier!r}: {reason}")


class MetalwireInvalidOptionError(MetalwireError, ValueError):
    """Signal an option name outside the closed ``singleton``/``instantiate`` set."""

    def __init__(self, option_name: str) -> None:
        self.option_name = option_name
        super().__init__(
            f"Unknown container option {option_name!r}; expected 'singleton' or 'instantiate'.",
        )


class MetalwireContainerNotSetError(MetalwireError):
    """Signal use of the pytest plugin before a container fixture is provided.

    Typical fix is overriding the ``metalwire_container`` fixture in the test
    suite's ``conftest.py``.
    """
