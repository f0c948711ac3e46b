"""Pytest fixtures for tests that swap container entries.

Enable with ``pytest_plugins = ["metalwire.integrations.pytest_plugin"]`` in the
root ``conftest.py`` and override ``metalwire_container`` there.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

import pytest

from metalwire.container import Container
from metalwire.exceptions import MetalwireContainerNotSetError
from metalwire.options import ContainerOptions

_MOCK_OPTIONS: ContainerOptions = {"singleton": False, "instantiate": False}


@dataclass(frozen=True, slots=True)
class _SavedEntry:
    registered: bool
    entry: Any
    options: Mapping[str, Any] | None


class ContainerOverrides:
    """Overwrite container entries for the duration of a test.

    Each overridden specifier remembers its original registration and
    option entry the first time it is overridden; ``restore`` puts them
    back and drops anything cached in between.
    """

    def __init__(self, container: Container) -> None:
        self.container = container
        self._saved: dict[str, _SavedEntry] = {}

    def inject(self, specifier: str, value: Any, options: ContainerOptions | None = None) -> None:
        """Register ``value`` under ``specifier`` in place of the current entry.

        Args:
            specifier: Container key to override.
            value: Replacement class or value.
            options: Lifecycle options for the replacement. Defaults to handing
                out ``value`` itself on every lookup.

        """
        if specifier not in self._saved:
            registrations = self.container.registrations
            self._saved[specifier] = _SavedEntry(
                registered=specifier in registrations,
                entry=registrations.get(specifier),
                options=self.container.options.entry_for(specifier),
            )
        self.container.register(specifier, value, options or _MOCK_OPTIONS)
        self.container.clear_cache(specifier)

    def restore(self, specifier: str) -> None:
        """Restore the entry that was in place before the first ``inject``."""
        saved = self._saved.pop(specifier)
        if saved.registered:
            self.container.register(specifier, saved.entry)
        else:
            self.container.unregister(specifier)
        self.container.options.replace(specifier, saved.options)
        self.container.clear_cache(specifier)

    def restore_all(self) -> None:
        for specifier in list(self._saved):
            self.restore(specifier)


@pytest.fixture()
def metalwire_container() -> Container:
    """Fixture hook for the container under test.

    Users must override this fixture in their own test suite.

    """
    msg = (
        "The metalwire pytest plugin requires overriding the 'metalwire_container' fixture in "
        "your test suite. Define @pytest.fixture() def metalwire_container() -> Container: ... "
        "and return a configured container."
    )
    raise MetalwireContainerNotSetError(msg)


@pytest.fixture()
def container_overrides(metalwire_container: Container) -> Iterator[ContainerOverrides]:
    """Provide ``ContainerOverrides`` for ``metalwire_container``, restored at teardown."""
    overrides = ContainerOverrides(metalwire_container)
    try:
        yield overrides
    finally:
        overrides.restore_all()
