from __future__ import annotations

import importlib
import pkgutil
from collections.abc import Mapping
from types import ModuleType
from typing import Any

from metalwire.resolvers.base import Resolver

_DEFAULT_EXPORT = "default"


class PackageResolver(Resolver):
    """Resolve entries from modules laid out by type under a Python package.

    ``"serializer:post"`` maps to the module ``<package>.serializers.post`` and
    ``"orm-adapter:blog/memory"`` to ``<package>.orm_adapters.blog.memory``.
    The module's ``default`` attribute is the entry; a module without one is
    itself the entry.

    Args:
        package: Importable name of the root package.
        type_directories: Optional subpackage names overriding the default
            ``<type with dashes as underscores>s`` convention.

    """

    def __init__(self, package: str, type_directories: Mapping[str, str] | None = None) -> None:
        super().__init__()
        self.package = package
        self._type_directories = dict(type_directories or {})

    def type_package(self, type_name: str) -> str:
        directory = self._type_directories.get(type_name)
        if directory is None:
            directory = f"{type_name.replace('-', '_')}s"
        return f"{self.package}.{directory}"

    def module_name(self, type_name: str, name: str) -> str:
        relative = name.replace("-", "_").replace("/", ".")
        return f"{self.type_package(type_name)}.{relative}"

    def retrieve_other(self, type_name: str, name: str) -> Any:
        module = self._import_optional(self.module_name(type_name, name))
        if module is None:
            return None
        return getattr(module, _DEFAULT_EXPORT, module)

    def available_for_other(self, type_name: str) -> list[str]:
        package_name = self.type_package(type_name)
        package = self._import_optional(package_name)
        search_path = getattr(package, "__path__", None)
        if search_path is None:
            return []

        specifiers = []
        for module_info in pkgutil.walk_packages(search_path, prefix=f"{package_name}."):
            if module_info.ispkg:
                continue
            relative = module_info.name[len(package_name) + 1 :]
            specifiers.append(f"{type_name}:{relative.replace('.', '/')}")
        return specifiers

    @staticmethod
    def _import_optional(module_name: str) -> ModuleType | None:
        try:
            return importlib.import_module(module_name)
        except ModuleNotFoundError as exc:
            # Only a missing module along the requested path means "no entry";
            # a missing import inside an existing module is a real error.
            missing = exc.name or ""
            if module_name == missing or module_name.startswith(f"{missing}."):
                return None
            raise

    def __repr__(self) -> str:
        return f"PackageResolver({self.package!r})"
