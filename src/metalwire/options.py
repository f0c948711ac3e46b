from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal, TypeAlias, TypedDict, get_args

from metalwire.defaults import GLOBAL_DEFAULT_OPTIONS, SEEDED_OPTIONS
from metalwire.exceptions import MetalwireInvalidOptionError
from metalwire.specifiers import split_type

OptionName: TypeAlias = Literal["singleton", "instantiate"]
OPTION_NAMES: frozenset[str] = frozenset(get_args(OptionName))


class ContainerOptions(TypedDict, total=False):
    """Lifecycle policy for a container entry or a whole entry type."""

    singleton: bool
    """Cache the looked up value and hand out the same object on every lookup.

    Paired with ``instantiate`` the container creates that singleton on first
    lookup. Without it, the stored entry itself is assumed to be the singleton.
    """

    instantiate: bool
    """Create an instance on lookup instead of returning the stored entry."""


def validate_option_name(option_name: str) -> None:
    if option_name not in OPTION_NAMES:
        raise MetalwireInvalidOptionError(option_name)


class OptionsTable:
    """Option entries keyed by full specifier or by bare type name.

    Reads merge the specifier entry, the type entry and the global defaults key
    by key, first defined value wins. Entries are only ever overwritten.
    """

    def __init__(self, type_options: Mapping[str, Mapping[str, Any]]) -> None:
        self._entries: dict[str, dict[str, Any]] = {}
        for key, options in type_options.items():
            for option_name in options:
                validate_option_name(option_name)
            self._entries[key] = dict(options)

    def get(self, specifier: str, option_name: str) -> Any:
        validate_option_name(option_name)
        type_name = split_type(specifier)
        for entry in (
            self._entries.get(specifier),
            self._entries.get(type_name),
            GLOBAL_DEFAULT_OPTIONS,
        ):
            if entry is not None and option_name in entry:
                return entry[option_name]
        return None

    def set(self, specifier: str, option_name: str, value: Any) -> None:
        validate_option_name(option_name)
        entry = self._entries.get(specifier)
        if entry is None:
            # A fresh entry pins the other option to False rather than to the
            # type or global fallback.
            entry = self._entries[specifier] = dict(SEEDED_OPTIONS)
        entry[option_name] = value

    def entry_for(self, specifier: str) -> Mapping[str, Any] | None:
        """Return the raw entry stored for exactly ``specifier``, if any."""
        entry = self._entries.get(specifier)
        return None if entry is None else dict(entry)

    def replace(self, specifier: str, entry: Mapping[str, Any] | None) -> None:
        """Put back an entry captured with ``entry_for``; ``None`` removes it."""
        if entry is None:
            self._entries.pop(specifier, None)
            return
        for option_name in entry:
            validate_option_name(option_name)
        self._entries[specifier] = dict(entry)
