from metalwire.resolvers.base import Resolver
from metalwire.resolvers.package import PackageResolver
from metalwire.resolvers.protocol import ResolverProtocol

__all__ = [
    "PackageResolver",
    "Resolver",
    "ResolverProtocol",
]
