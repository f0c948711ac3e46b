from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ResolverProtocol(Protocol):
    """Protocol for a source of container entries.

    A container consults its resolvers in order and takes the first entry
    found, so each resolver only needs to know about its own sources.
    """

    def retrieve(self, specifier: str) -> Any:
        """Return the entry for ``specifier``, or ``None`` when this resolver has none.

        Any falsy result counts as "not found" and the container moves on to
        the next resolver.

        Must be repeatable: the same specifier on an unchanged resolver yields an
        equivalent entry.

        Args:
            specifier: Container key in the ``"type:name"`` form.

        """

    def available_for_type(self, type_name: str) -> Iterable[str]:
        """Return every ``"type:name"`` specifier this resolver can provide for a type.

        Implementations enumerate eagerly but must not instantiate anything.

        Args:
            type_name: Type part of the specifiers to list.

        """
