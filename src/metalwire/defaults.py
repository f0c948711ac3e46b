from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Final

GLOBAL_DEFAULT_OPTIONS: Final[Mapping[str, bool]] = MappingProxyType(
    {"instantiate": False, "singleton": True},
)
"""Fallback used when neither the specifier nor its type configures an option."""

SEEDED_OPTIONS: Final[Mapping[str, bool]] = MappingProxyType(
    {"singleton": False, "instantiate": False},
)
"""Values an option entry starts with the first time ``set_option`` touches it."""

DEFAULT_TYPE_OPTIONS: Final[Mapping[str, Mapping[str, bool]]] = MappingProxyType(
    {
        "action": {"singleton": False, "instantiate": True},
        "config": {"singleton": True, "instantiate": False},
        "initializer": {"singleton": True, "instantiate": False},
        "orm-adapter": {"singleton": True, "instantiate": True},
        "model": {"singleton": False, "instantiate": False},
        "serializer": {"singleton": True, "instantiate": True},
        "service": {"singleton": True, "instantiate": True},
    },
)
"""Built-in lifecycle policy per entry type.

Actions get a fresh instance per lookup, models are handed out as classes,
config and initializers are stored values, and the remaining types are
lazily created singletons.
"""
