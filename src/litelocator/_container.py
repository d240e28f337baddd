from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from ._config import definitions_from_mapping, read_toml
from ._definition import ClassDefinition, LiteralDefinition, ServiceDefinition, make_definition
from ._errors import ResolutionAborted, ServiceNotFound, UnresolvableArgumentReference
from ._events import AFTER_SERVICE_RESOLVE, BEFORE_SERVICE_RESOLVE, ServiceProvider, ServiceResolveEvent
from ._loader import ImportLoader
from ._registry import ServiceRegistry
from ._resolver import Resolver


if TYPE_CHECKING:
    import os
    from collections.abc import Mapping, Sequence

    from ._events import EventsManager
    from ._loader import ClassLoader


logger = logging.getLogger(__name__)

_default_container: Container | None = None


class Container:
    """Service container.

    - register services by name: instances, classes, factories or complex recipes
    - resolve them lazily, shared (one instance) or not (fresh instance per call)
    - constructor, setter and property injection from complex definitions
    - optional resolution events and a process-wide default container.

    Entry points are serialised with a re-entrant lock; factories and
    constructors run while it is held.
    """

    def __init__(
        self,
        *,
        loader: ClassLoader | None = None,
        events_manager: EventsManager | None = None,
    ) -> None:
        self._registry = ServiceRegistry()
        self._resolver = Resolver(self)
        self._loader: ClassLoader = loader or ImportLoader()
        self._events_manager = events_manager
        self._fresh_instance = False
        self._lock = threading.RLock()

    # registration

    def set(self, name: str, definition: object, shared: bool = False) -> ServiceDefinition:  # noqa: FBT001, FBT002
        """Register `definition` under `name`, replacing any previous one.

        Example:
          container.set("clock", time.monotonic)
          container.set("logger", {"className": "app.log:FileLogger",
                                   "arguments": [{"type": "parameter", "value": "/log"}]})

        A shared instance already cached for `name` is dropped, so the next
        `get()` builds from the new definition.
        """
        return self.set_raw(name, make_definition(definition, shared=shared))

    def set_shared(self, name: str, definition: object) -> ServiceDefinition:
        return self.set(name, definition, shared=True)

    def set_raw(self, name: str, definition: ServiceDefinition) -> ServiceDefinition:
        """Register a definition object as is, without normalising it."""
        if not isinstance(definition, ServiceDefinition):
            msg = f"Expected a ServiceDefinition, got {type(definition).__name__}"
            raise TypeError(msg)

        with self._lock:
            self._registry.register(name, definition)
            self._registry.invalidate(name)
        logger.debug("Registered %s service %r", "shared" if definition.shared else "non-shared", name)
        return definition

    def attempt(self, name: str, definition: object, shared: bool = False) -> ServiceDefinition | None:  # noqa: FBT001, FBT002
        """Register only if `name` is free. Returns the new definition, or None when nothing changed."""
        with self._lock:
            if self._registry.has(name):
                return None
            return self.set(name, definition, shared=shared)

    def register(self, provider: ServiceProvider) -> None:
        if not isinstance(provider, ServiceProvider):
            msg = f"{type(provider).__name__} does not provide a register(container) method"
            raise TypeError(msg)
        provider.register(self)

    def load_from_mapping(self, services: Mapping[str, Any]) -> None:
        definitions = definitions_from_mapping(services)
        with self._lock:
            for name, definition in definitions.items():
                self.set_raw(name, definition)

    def load_from_toml(self, path: str | os.PathLike[str]) -> None:
        self.load_from_mapping(read_toml(path))

    def remove(self, name: str) -> None:
        with self._lock:
            self._registry.remove(name)

    def has(self, name: str) -> bool:
        return self._registry.has(name)

    def get_service(self, name: str) -> ServiceDefinition:
        """Return the stored definition itself; edits apply from the next resolution on."""
        return self._registry.lookup(name)

    def get_services(self) -> dict[str, ServiceDefinition]:
        return self._registry.definitions()

    def reset(self) -> None:
        """Drop every cached shared instance. Definitions are kept."""
        with self._lock:
            self._registry.clear_cache()

    # collaborators

    def get_loader(self) -> ClassLoader:
        return self._loader

    def set_loader(self, loader: ClassLoader) -> None:
        self._loader = loader

    def get_events_manager(self) -> EventsManager | None:
        return self._events_manager

    def set_events_manager(self, events_manager: EventsManager | None) -> None:
        self._events_manager = events_manager

    # resolution

    def get(self, name: str, /, *args: Any, **kwargs: Any) -> Any:
        """Resolve `name` to an instance.

        - A shared service that is already cached is returned as is; `args`
          and `kwargs` are ignored in that case.
        - An unregistered name that the class loader knows is resolved as a
          non-shared class service, and registered once that succeeds.
        - Otherwise `ServiceNotFound` is raised.
        """
        with self._lock:
            if self._registry.has(name):
                definition = self._registry.lookup(name)
            elif self._loader.is_known(name):
                instance = self._resolve_service(name, ClassDefinition(name), args, kwargs)
                logger.debug("Registering %r implicitly as a class service", name)
                self._registry.register(name, ClassDefinition(name))
                return instance
            else:
                raise ServiceNotFound(name)

            return self._resolve_service(name, definition, args, kwargs)

    def get_shared(self, name: str, /, *args: Any, **kwargs: Any) -> Any:
        """Resolve `name` once and return that instance on every later call, whatever its definition says."""
        with self._lock:
            if self._registry.is_cached(name):
                self._fresh_instance = False
                return self._registry.cached(name)

            instance = self.get(name, *args, **kwargs)
            if not isinstance(self._registry.lookup(name), LiteralDefinition):
                self._registry.cache(name, instance)
            return instance

    def was_fresh_instance(self) -> bool:
        """Whether the last `get()`/`get_shared()` built its instance instead of reusing a cached one."""
        return self._fresh_instance

    def _resolve_service(
        self,
        name: str,
        definition: ServiceDefinition,
        args: Sequence[Any],
        kwargs: Mapping[str, Any],
    ) -> Any:
        if definition.shared and self._registry.is_cached(name):
            logger.debug("Returning cached shared instance of %r", name)
            self._fresh_instance = False
            return self._registry.cached(name)

        with self._resolver.resolving(name):
            if self._notify(BEFORE_SERVICE_RESOLVE, ServiceResolveEvent(name, tuple(args), dict(kwargs))) is False:
                raise ResolutionAborted(name)

            instance = self._resolver.resolve(definition, args, kwargs)

            self._notify(AFTER_SERVICE_RESOLVE, ServiceResolveEvent(name, tuple(args), dict(kwargs), instance))

        if definition.shared and not isinstance(definition, LiteralDefinition):
            self._registry.cache(name, instance)

        self._fresh_instance = True
        return instance

    def _resolve_reference(self, name: str) -> Any:
        # called by the resolver for service arguments, inside an outer resolution
        if not self._registry.has(name):
            raise UnresolvableArgumentReference(name)
        return self._resolve_service(name, self._registry.lookup(name), (), {})

    def _notify(self, event_name: str, event: ServiceResolveEvent) -> object:
        if self._events_manager is None:
            return None
        return self._events_manager.notify(event_name, event)

    # default container

    @classmethod
    def set_default(cls, container: Container) -> None:
        """Make `container` the process-wide default, replacing any previous one."""
        global _default_container  # noqa: PLW0603
        _default_container = container

    @classmethod
    def get_default(cls) -> Container | None:
        return _default_container

    @classmethod
    def reset_default(cls) -> None:
        global _default_container  # noqa: PLW0603
        _default_container = None

    # sugar over get/set/has/remove

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __setitem__(self, name: str, definition: object) -> None:
        self.set(name, definition)

    def __delitem__(self, name: str) -> None:
        self.remove(name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __getattr__(self, name: str) -> Any:
        # only reached when normal attribute lookup fails
        if name.startswith("_") or not self.has(name):
            msg = f"{type(self).__name__!r} object has no attribute or service {name!r}"
            raise AttributeError(msg)
        return self.get(name)
