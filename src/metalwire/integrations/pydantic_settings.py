from __future__ import annotations

import importlib
import warnings
from typing import Any

_PYDANTIC_V1_WARNING_PATTERN = (
    r"Core Pydantic V1 functionality isn't compatible with Python 3\.14 or greater\."
)


def _load_base_settings(module_name: str) -> type[Any] | None:
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return None
    base_settings = getattr(module, "BaseSettings", None)
    if isinstance(base_settings, type):
        return base_settings
    return None


def _load_legacy_base_settings() -> type[Any] | None:
    with warnings.catch_warnings():
        warnings.filterwarnings(
            "ignore",
            message=_PYDANTIC_V1_WARNING_PATTERN,
            category=UserWarning,
        )
        return _load_base_settings("pydantic.v1")


def _discover_settings_bases() -> tuple[type[Any], ...]:
    candidates = (_load_base_settings("pydantic_settings"), _load_legacy_base_settings())
    unique = {id(candidate): candidate for candidate in candidates if candidate is not None}
    return tuple(unique.values())


SETTINGS_BASES: tuple[type[Any], ...] = _discover_settings_bases()


def is_pydantic_settings_subclass(candidate: object) -> bool:
    """Return whether ``candidate`` is a pydantic settings class.

    Both ``pydantic_settings.BaseSettings`` and the legacy
    ``pydantic.v1.BaseSettings`` are recognized when installed. Without
    pydantic every candidate yields ``False``.

    ``Container.register`` uses this to register settings classes, typically
    under ``config:*``, as lazily created singletons: the first lookup reads
    the environment, later lookups reuse the same settings object.

    Args:
        candidate: Object to test.

    """
    if not isinstance(candidate, type):
        return False
    try:
        return any(issubclass(candidate, base) for base in SETTINGS_BASES)
    except TypeError:
        return False


__all__ = [
    "SETTINGS_BASES",
    "is_pydantic_settings_subclass",
]
