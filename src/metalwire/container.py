from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any, NamedTuple, TypeAlias

from metalwire.defaults import DEFAULT_TYPE_OPTIONS
from metalwire.exceptions import MetalwireResolutionError
from metalwire.factory import Factory
from metalwire.integrations.pydantic_settings import is_pydantic_settings_subclass
from metalwire.markers import find_injections
from metalwire.options import ContainerOptions, OptionName, OptionsTable
from metalwire.resolvers.protocol import ResolverProtocol
from metalwire.specifiers import name_of, parse_specifier

logger = logging.getLogger(__name__)

OnLoadHook: TypeAlias = Callable[[Any], Any]
"""Callback invoked with a class the first time a container resolves it."""

_INSTANCE_INJECTIONS_META_KEY = "injections"
_CLASS_INJECTIONS_META_KEY = "class_injections"
_VALUE_INJECTIONS_META_KEY = "value_injections"
_CONTAINER_NAME_META_KEY = "container_name"
_SETTINGS_OPTIONS: ContainerOptions = {"singleton": True, "instantiate": True}


class _CachedLookup(NamedTuple):
    factory: Factory[Any]
    instance: Any


class Container:
    """Turn ``"type:name"`` specifiers into configured classes and instances.

    Entries come from manual registrations first, then from resolvers in the
    order they were added. Whether a lookup returns a cached object, a fresh
    instance or the bare class is governed by the ``singleton`` and
    ``instantiate`` options, configured per specifier or per type.

    Every instance the container creates gets its injection markers replaced by
    the looked up dependencies. Classes may be shared between containers, so all
    per-class state the container keeps (injection points, provenance, anything
    stored through ``meta_for``) lives in the container, never on the class.

    Examples:
        .. code-block:: python

            container = Container(PackageResolver("blog"))
            container.register("service:mailer", Mailer)

            mailer = container.lookup("service:mailer")
            assert mailer is container.lookup("service:mailer")

    """

    def __init__(
        self,
        *resolvers: ResolverProtocol,
        type_options: Mapping[str, Mapping[str, Any]] = DEFAULT_TYPE_OPTIONS,
    ) -> None:
        """Initialize a container with an ordered resolver chain.

        Args:
            *resolvers: Resolvers to consult, highest precedence first.
            type_options: Lifecycle options per entry type. Defaults to
                ``DEFAULT_TYPE_OPTIONS``; pass ``{}`` to rely on the global
                defaults (singleton, not instantiated) only.

        """
        self._registry: dict[str, Any] = {}
        self._resolvers: list[ResolverProtocol] = []
        self._options = OptionsTable(type_options)
        self._on_load_hooks: dict[str, list[OnLoadHook]] = {}

        self._lookups: dict[str, _CachedLookup] = {}
        self._class_lookups: dict[str, Any] = {}
        self._factory_lookups: dict[str, Factory[Any]] = {}
        # id(key) -> (key, record); holding the key keeps its id from being reused.
        self._meta: dict[int, tuple[Any, dict[str, Any]]] = {}

        for resolver in resolvers:
            self.add_resolver(resolver)

    @property
    def resolvers(self) -> tuple[ResolverProtocol, ...]:
        return tuple(self._resolvers)

    @property
    def registrations(self) -> Mapping[str, Any]:
        """Read-only view of manual registrations."""
        return MappingProxyType(self._registry)

    @property
    def options(self) -> OptionsTable:
        """Option entries behind ``get_option`` and ``set_option``."""
        return self._options

    # region Registration
    def add_resolver(self, resolver: ResolverProtocol) -> None:
        """Append a resolver at the lowest precedence.

        Args:
            resolver: Object implementing ``retrieve`` and ``available_for_type``.

        """
        self._resolvers.append(resolver)
        logger.debug("Added resolver %r at position %d", resolver, len(self._resolvers) - 1)

    def register(
        self,
        specifier: str,
        entry: Any,
        options: ContainerOptions | None = None,
        *,
        on_load: OnLoadHook | None = None,
    ) -> None:
        """Add a manual registration that takes precedence over every resolver.

        Registering does not invalidate values already cached for the
        specifier; call ``clear_cache`` to override an entry that was looked up.

        Args:
            specifier: Container key in the ``"type:name"`` form.
            entry: Class or value to store.
            options: Lifecycle options for exactly this specifier. When omitted
                for a pydantic settings class, the entry is registered as a
                lazily created singleton.
            on_load: Callback run with the entry the first time it is resolved.

        Raises:
            MetalwireInvalidSpecifierError: If the specifier is malformed.
            MetalwireInvalidOptionError: If ``options`` has an unknown key.

        """
        parse_specifier(specifier)
        self._registry[specifier] = entry
        if options is None and is_pydantic_settings_subclass(entry):
            options = _SETTINGS_OPTIONS
        if options:
            for option_name, value in options.items():
                self.set_option(specifier, option_name, value)
        if on_load is not None:
            self.on_load(specifier, on_load)

    def unregister(self, specifier: str) -> Any:
        """Remove a manual registration and the caches derived from it.

        Options for the specifier are kept.

        Returns:
            The removed entry, or ``None`` when nothing was registered.

        """
        entry = self._registry.pop(specifier, None)
        self.clear_cache(specifier)
        return entry

    def on_load(self, specifier: str, hook: OnLoadHook) -> None:
        """Run ``hook(cls)`` once, when ``specifier`` is first resolved to a class.

        Use it for one-time class customization, for example generating
        accessors from declarations, that should happen before any instance is
        created. Hooks run again after ``clear_cache``.
        """
        self._on_load_hooks.setdefault(specifier, []).append(hook)

    # endregion Registration

    # region Resolution
    def factory_for(self, specifier: str, *, loose: bool = False) -> Factory[Any] | None:
        """Return the factory for ``specifier``.

        Typically only needed when you want to control when and how an object
        is instantiated.

        Args:
            specifier: Container key in the ``"type:name"`` form.
            loose: Return ``None`` instead of raising when nothing is found.

        Raises:
            MetalwireResolutionError: If nothing is found and ``loose`` is false.
            MetalwireInvalidSpecifierError: If the specifier is malformed.

        """
        factory = self._factory_lookups.get(specifier)
        if factory is not None:
            return factory

        klass = self._class_lookups.get(specifier)
        if klass is None:
            parse_specifier(specifier)
            klass = self._resolve_class(specifier)
            if klass is None:
                if loose:
                    return None
                raise MetalwireResolutionError(specifier)
            self._run_first_resolution(specifier, klass)
            self._class_lookups[specifier] = klass

        factory = Factory(specifier, klass, self)
        self._factory_lookups[specifier] = factory
        return factory

    def lookup(self, specifier: str, *, loose: bool = False) -> Any:
        """Look up ``specifier`` and apply its lifecycle options.

        Returns the cached singleton when there is one, otherwise a new instance
        (``instantiate=True``) or the stored class itself (``instantiate=False``).

        Args:
            specifier: Container key in the ``"type:name"`` form.
            loose: Return ``None`` instead of raising when nothing is found.

        Raises:
            MetalwireResolutionError: If the specifier, or any dependency injected
                while building it, cannot be found and ``loose`` is false.
            MetalwireInstantiationError: If the entry must be instantiated but is
                not callable.

        """
        singleton = bool(self.get_option(specifier, "singleton"))
        if singleton:
            cached = self._lookups.get(specifier)
            if cached is not None:
                return cached.instance

        factory = self.factory_for(specifier, loose=loose)
        if factory is None:
            return None

        if not self.get_option(specifier, "instantiate"):
            if not singleton:
                return factory.cls
            self.apply_injections(factory.cls)
            self._lookups[specifier] = _CachedLookup(factory, factory.cls)
            return factory.cls

        instance = factory.create()
        if singleton and instance is not None:
            self._lookups[specifier] = _CachedLookup(factory, instance)
        return instance

    def lookup_all(self, type_name: str) -> dict[str, Any]:
        """Look up every entry available under ``type_name``.

        Every entry is resolved and, depending on its options, instantiated.
        Use it for bulk work such as visiting all models; prefer ``lookup`` when
        you need a single entry.

        Returns:
            Looked up values keyed by the name part of each specifier.

        """
        names = self.available_for_type(type_name)
        return {name: self.lookup(f"{type_name}:{name}") for name in names}

    def available_for_type(self, type_name: str) -> list[str]:
        """Return names of all entries under ``type_name``.

        Registrations come first, then each resolver's entries in chain order.
        Resolvers actively enumerate their sources (e.g. scan packages), so use
        this sparingly.
        """
        prefix = f"{type_name}:"
        specifiers = [specifier for specifier in self._registry if specifier.startswith(prefix)]
        for resolver in self._resolvers:
            specifiers.extend(resolver.available_for_type(type_name))
        names = (
            specifier[len(prefix) :] if specifier.startswith(prefix) else specifier
            for specifier in specifiers
        )
        return list(dict.fromkeys(names))

    def apply_injections(self, target: Any, *, from_factory: bool = False) -> None:
        """Replace injection markers on ``target`` with looked up dependencies.

        ``target`` is a freshly built instance, a class, or a stored value served
        without instantiation. The injection points of factory built instances
        are discovered once per class and reused for later instances; classes
        and stored values are scanned as themselves.

        Args:
            target: Object whose markers are replaced in place.
            from_factory: ``target`` was just built by a ``Factory``, so every
                instance of its class shares the same injection points.

        """
        if isinstance(target, type):
            owner, meta_key = target, _CLASS_INJECTIONS_META_KEY
        elif from_factory:
            owner, meta_key = type(target), _INSTANCE_INJECTIONS_META_KEY
        else:
            owner, meta_key = target, _VALUE_INJECTIONS_META_KEY

        meta = self.meta_for(owner)
        injections: dict[str, str] | None = meta.get(meta_key)
        if injections is None:
            injections = find_injections(target)
            meta[meta_key] = injections

        for attribute, specifier in injections.items():
            setattr(target, attribute, self.lookup(specifier))

    # endregion Resolution

    # region Options and metadata
    def get_option(self, specifier: str, option_name: OptionName | str) -> Any:
        """Return an option for a specifier or a bare type.

        The specifier's own entry wins, then its type's entry, then the global
        defaults (``singleton=True``, ``instantiate=False``), key by key.
        """
        return self._options.get(specifier, option_name)

    def set_option(self, specifier: str, option_name: OptionName | str, value: Any) -> None:
        """Set an option for a specifier or a bare type.

        Notes:
            The first option set on a previously unconfigured key pins the other
            option to ``False``, not to the type or global fallback.

        """
        self._options.set(specifier, option_name, value)

    def meta_for(self, key: Any) -> dict[str, Any]:
        """Return a mutable record tied to ``key`` for the lifetime of this container.

        Keys are compared by identity. Store per-class caches here rather than
        on the class, which other containers may share.
        """
        slot = self._meta.get(id(key))
        if slot is None:
            slot = self._meta[id(key)] = (key, {})
        return slot[1]

    def clear_cache(self, specifier: str) -> None:
        """Drop cached class, factory and instance for ``specifier``.

        Registrations and options are kept. The next lookup resolves again and
        reruns first-resolution hooks.
        """
        self._lookups.pop(specifier, None)
        self._class_lookups.pop(specifier, None)
        self._factory_lookups.pop(specifier, None)
        logger.debug("Cleared cached lookups for %r", specifier)

    # endregion Options and metadata

    def _resolve_class(self, specifier: str) -> Any:
        entry = self._registry.get(specifier)
        if entry is not None:
            logger.debug("Resolved %r from manual registration", specifier)
            return entry
        for resolver in self._resolvers:
            entry = resolver.retrieve(specifier)
            if entry:
                logger.debug("Resolved %r through resolver %r", specifier, resolver)
                return entry
        return None

    def _run_first_resolution(self, specifier: str, klass: Any) -> None:
        self.meta_for(klass)[_CONTAINER_NAME_META_KEY] = name_of(specifier)
        for hook in self._on_load_hooks.get(specifier, ()):
            logger.debug("Running on-load hook %r for %r", hook, specifier)
            hook(klass)
