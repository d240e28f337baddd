from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ._errors import ServiceNotFound


if TYPE_CHECKING:
    from ._definition import ServiceDefinition


logger = logging.getLogger(__name__)


class ServiceRegistry:
    """Definitions by name, plus the cache of resolved shared instances.

    `register()` never touches the cache: a shared instance built from an
    older definition stays cached until `invalidate()`, `remove()` or
    `clear_cache()`.
    """

    def __init__(self) -> None:
        self._definitions: dict[str, ServiceDefinition] = {}
        self._shared: dict[str, object] = {}

    def register(self, name: str, definition: ServiceDefinition) -> None:
        if name in self._definitions:
            logger.debug("Replacing definition of service %r", name)
        self._definitions[name] = definition

    def lookup(self, name: str) -> ServiceDefinition:
        try:
            return self._definitions[name]
        except KeyError:
            raise ServiceNotFound(name) from None

    def has(self, name: str) -> bool:
        return name in self._definitions

    def remove(self, name: str) -> None:
        self._definitions.pop(name, None)
        self._shared.pop(name, None)

    def definitions(self) -> dict[str, ServiceDefinition]:
        return dict(self._definitions)

    # shared instance cache

    def is_cached(self, name: str) -> bool:
        return name in self._shared

    def cached(self, name: str) -> object:
        return self._shared[name]

    def cache(self, name: str, instance: object) -> None:
        self._shared[name] = instance

    def invalidate(self, name: str) -> None:
        self._shared.pop(name, None)

    def clear_cache(self) -> None:
        self._shared.clear()
