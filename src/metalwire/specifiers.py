from __future__ import annotations

from typing import NamedTuple

from metalwire.exceptions import MetalwireInvalidSpecifierError

_SEPARATOR = ":"
_UNSET_NAMES = frozenset({"None", "undefined"})


class Specifier(NamedTuple):
    """A parsed ``"type:name"`` container key."""

    type: str
    name: str

    def __str__(self) -> str:
        return f"{self.type}{_SEPARATOR}{self.name}"


def split_type(specifier: str) -> str:
    """Return the type component of a specifier or bare type name."""
    return specifier.split(_SEPARATOR, 1)[0]


def parse_specifier(specifier: str) -> Specifier:
    """Split a specifier on its first ``:`` and validate both parts.

    Raises:
        MetalwireInvalidSpecifierError: If the type or name part is missing, or
            the name looks like a formatted ``None``.

    """
    type_name, separator, name = specifier.partition(_SEPARATOR)
    if not separator or not name:
        msg = "expected the form 'type:name'"
        raise MetalwireInvalidSpecifierError(specifier, msg)
    if not type_name:
        msg = "the type part is empty"
        raise MetalwireInvalidSpecifierError(specifier, msg)
    if name in _UNSET_NAMES:
        msg = (
            f"you tried to look up a {type_name} called {name} - did you pass in a variable "
            "that doesn't have the expected value?"
        )
        raise MetalwireInvalidSpecifierError(specifier, msg)
    return Specifier(type=type_name, name=name)


def name_of(specifier: str) -> str:
    """Return the name part of a full specifier."""
    return specifier.split(_SEPARATOR, 1)[1]
