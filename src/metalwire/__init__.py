from metalwire.container import Container
from metalwire.defaults import DEFAULT_TYPE_OPTIONS, GLOBAL_DEFAULT_OPTIONS
from metalwire.exceptions import (
    MetalwireContainerNotSetError,
    MetalwireError,
    MetalwireInstantiationError,
    MetalwireInvalidOptionError,
    MetalwireInvalidSpecifierError,
    MetalwireResolutionError,
)
from metalwire.factory import Factory
from metalwire.markers import Injection, inject, is_injection
from metalwire.object import ContainerObject, collect_inherited
from metalwire.options import ContainerOptions
from metalwire.resolvers import PackageResolver, Resolver, ResolverProtocol
from metalwire.specifiers import Specifier, parse_specifier

__all__ = [
    "DEFAULT_TYPE_OPTIONS",
    "GLOBAL_DEFAULT_OPTIONS",
    "Container",
    "ContainerObject",
    "ContainerOptions",
    "Factory",
    "Injection",
    "MetalwireContainerNotSetError",
    "MetalwireError",
    "MetalwireInstantiationError",
    "MetalwireInvalidOptionError",
    "MetalwireInvalidSpecifierError",
    "MetalwireResolutionError",
    "PackageResolver",
    "Resolver",
    "ResolverProtocol",
    "Specifier",
    "collect_inherited",
    "inject",
    "is_injection",
    "parse_specifier",
]
