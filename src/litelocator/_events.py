from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable


if TYPE_CHECKING:
    from ._container import Container


BEFORE_SERVICE_RESOLVE = "di:beforeServiceResolve"
AFTER_SERVICE_RESOLVE = "di:afterServiceResolve"


@dataclass
class ServiceResolveEvent:
    name: str
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)
    instance: Any = None


@runtime_checkable
class EventsManager(Protocol):
    """Receives resolution notifications. Returning ``False`` stops a resolution."""

    def notify(self, event_name: str, event: ServiceResolveEvent) -> object: ...


@runtime_checkable
class InjectionAware(Protocol):
    """Objects that want the container that built them."""

    def set_container(self, container: Container) -> None: ...


@runtime_checkable
class ServiceProvider(Protocol):
    """A bundle of registrations applied with `Container.register()`."""

    def register(self, container: Container) -> None: ...
