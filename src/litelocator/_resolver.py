from __future__ import annotations

import inspect
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from ._definition import (
    ClassDefinition,
    ComplexDefinition,
    FactoryDefinition,
    InstanceSpec,
    LiteralDefinition,
    Parameter,
    ServiceReference,
)
from ._errors import CircularDependency, ConstructorArityMismatch, DefinitionError, ResolutionError
from ._events import InjectionAware


if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping, Sequence

    from ._container import Container
    from ._definition import Argument, ServiceDefinition
    from ._loader import ClassLoader


logger = logging.getLogger(__name__)


class Resolver:
    """Turns a definition into an instance, one branch per definition kind.

    Service references are resolved back through the owning container, so
    nested services get the same caching, events and cycle detection as a
    top-level `Container.get()`.
    """

    def __init__(self, container: Container) -> None:
        self._container = container
        self._in_progress: list[str] = []

    @property
    def in_progress(self) -> tuple[str, ...]:
        return tuple(self._in_progress)

    @contextmanager
    def resolving(self, name: str) -> Iterator[None]:
        """Mark `name` as being resolved for the duration of the block."""
        if name in self._in_progress:
            raise CircularDependency([*self._in_progress, name])

        self._in_progress.append(name)
        try:
            yield
        finally:
            self._in_progress.pop()

    def resolve(
        self,
        definition: ServiceDefinition,
        args: Sequence[Any] = (),
        kwargs: Mapping[str, Any] | None = None,
    ) -> object:
        kwargs = kwargs or {}

        if isinstance(definition, LiteralDefinition):
            instance = definition.instance
        elif isinstance(definition, FactoryDefinition):
            instance = definition.builder(*args, **kwargs)
        elif isinstance(definition, ClassDefinition):
            instance = self._construct(definition.class_name, args, kwargs)
        elif isinstance(definition, ComplexDefinition):
            instance = self._build(definition, args, kwargs)
        else:
            msg = f"Unsupported service definition {type(definition).__name__}"
            raise DefinitionError(msg)

        self._inject_container(instance)
        return instance

    def resolve_argument(self, argument: Argument) -> Any:
        if isinstance(argument, Parameter):
            return argument.value

        if isinstance(argument, ServiceReference):
            return self._container._resolve_reference(argument.name)  # noqa: SLF001

        if isinstance(argument, InstanceSpec):
            values = [self.resolve_argument(a) for a in argument.arguments]
            instance = self._construct(argument.class_name, values, {})
            self._inject_container(instance)
            return instance

        msg = f"Unsupported argument {argument!r}"
        raise DefinitionError(msg)

    def _build(self, definition: ComplexDefinition, args: Sequence[Any], kwargs: Mapping[str, Any]) -> object:
        # runtime arguments replace the declared constructor arguments
        if args or kwargs:
            values = list(args)
        else:
            values = [self.resolve_argument(a) for a in definition.arguments]

        instance = self._construct(definition.class_name, values, kwargs)

        for call in definition.calls:
            method = getattr(instance, call.method, None)
            if not callable(method):
                msg = f"{type(instance).__name__} has no method {call.method!r} to call"
                raise ResolutionError(msg)
            method(*[self.resolve_argument(a) for a in call.arguments])

        for prop in definition.properties:
            setattr(instance, prop.name, self.resolve_argument(prop.value))

        return instance

    def _construct(self, class_name: str | type, args: Sequence[Any], kwargs: Mapping[str, Any]) -> object:
        return Constructor(self._container.get_loader()).construct(class_name, args, kwargs)

    def _inject_container(self, instance: object) -> None:
        if not inspect.isclass(instance) and isinstance(instance, InjectionAware):
            instance.set_container(self._container)


class Constructor:
    def __init__(self, loader: ClassLoader) -> None:
        self._loader = loader

    def construct(self, class_name: str | type, args: Sequence[Any], kwargs: Mapping[str, Any]) -> object:
        target = self._loader.resolve(class_name)
        self._bind_explicit(target, args, kwargs)
        logger.debug(
            "Constructing %s with %d positional and %d keyword argument(s)", _name_of(target), len(args), len(kwargs)
        )
        return target(*args, **kwargs)

    def _bind_explicit(self, target: Callable[..., Any], args: Sequence[Any], kwargs: Mapping[str, Any]) -> None:
        try:
            sig = inspect.signature(target)
        except (TypeError, ValueError):
            # some builtins carry no signature metadata; let the call decide
            return

        try:
            sig.bind(*args, **kwargs)
        except TypeError as e:
            msg = f"Arguments don't match {_name_of(target)} signature {sig}: {e}"
            raise ConstructorArityMismatch(msg) from e


def _name_of(target: object) -> str:
    return getattr(target, "__qualname__", None) or type(target).__name__
