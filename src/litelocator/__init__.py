"""Service locator and dependency injection container.

This package maps service names to construction recipes and resolves them into
live objects on demand, either shared (one cached instance) or fresh on every
call.

Exports:
- `Container`: registry of named services with `set`/`get`/`get_shared` and a
  process-wide default container.
- Definitions: `LiteralDefinition`, `ClassDefinition`, `FactoryDefinition` and
  `ComplexDefinition` (constructor, setter and property injection), built from
  `Parameter`, `ServiceReference`, `InstanceSpec`, `MethodCall` and
  `PropertyAssignment` arguments.
- Collaborators: `ClassLoader` (with the default `ImportLoader`),
  `EventsManager`, `InjectionAware` and `ServiceProvider` protocols.
- Errors: `ResolutionError` and its subclasses, plus `DefinitionError`.
"""

from ._container import Container
from ._definition import (
    Argument,
    ClassDefinition,
    ComplexDefinition,
    FactoryDefinition,
    InstanceSpec,
    LiteralDefinition,
    MethodCall,
    Parameter,
    PropertyAssignment,
    ServiceDefinition,
    ServiceReference,
    make_definition,
)
from ._errors import (
    CircularDependency,
    ClassNotFound,
    ConstructorArityMismatch,
    DefinitionError,
    ResolutionAborted,
    ResolutionError,
    ServiceNotFound,
    UnresolvableArgumentReference,
)
from ._events import (
    AFTER_SERVICE_RESOLVE,
    BEFORE_SERVICE_RESOLVE,
    EventsManager,
    InjectionAware,
    ServiceProvider,
    ServiceResolveEvent,
)
from ._loader import ClassLoader, ImportLoader


__all__ = [
    "AFTER_SERVICE_RESOLVE",
    "BEFORE_SERVICE_RESOLVE",
    "Argument",
    "CircularDependency",
    "ClassDefinition",
    "ClassLoader",
    "ClassNotFound",
    "ComplexDefinition",
    "ConstructorArityMismatch",
    "Container",
    "DefinitionError",
    "EventsManager",
    "FactoryDefinition",
    "ImportLoader",
    "InjectionAware",
    "InstanceSpec",
    "LiteralDefinition",
    "MethodCall",
    "Parameter",
    "PropertyAssignment",
    "ResolutionAborted",
    "ResolutionError",
    "ServiceDefinition",
    "ServiceNotFound",
    "ServiceProvider",
    "ServiceReference",
    "ServiceResolveEvent",
    "UnresolvableArgumentReference",
    "make_definition",
]
