"""Shared pytest fixtures for metalwire tests."""

import pytest

from metalwire.container import Container
from metalwire.resolvers import Resolver

pytest_plugins = ["pytester", "metalwire.integrations.pytest_plugin"]


@pytest.fixture()
def container() -> Container:
    """Container with the built-in type options."""
    return Container()


@pytest.fixture()
def bare_container() -> Container:
    """Container relying on the global defaults only."""
    return Container(type_options={})


@pytest.fixture()
def resolver() -> Resolver:
    """In-memory resolver with nothing registered."""
    return Resolver()


@pytest.fixture()
def metalwire_container(container: Container) -> Container:
    return container
