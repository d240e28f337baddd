from __future__ import annotations

import dataclasses
import functools
import inspect
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ._errors import DefinitionError


if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


@dataclass
class Parameter:
    """Literal value passed through unchanged."""

    value: Any


@dataclass
class ServiceReference:
    """Another registered service, resolved through the container."""

    name: str


@dataclass
class InstanceSpec:
    """A fresh, unregistered object built on the spot."""

    class_name: str | type
    arguments: list[Argument] = field(default_factory=list)


Argument = Parameter | ServiceReference | InstanceSpec


@dataclass
class MethodCall:
    method: str
    arguments: list[Argument] = field(default_factory=list)


@dataclass
class PropertyAssignment:
    name: str
    value: Argument


@dataclass
class ServiceDefinition:
    """Base of the four definition kinds.

    Definitions are mutable on purpose: `Container.get_service()` hands them out
    so callers can edit a recipe before its next resolution.
    """

    shared: bool = field(default=False, kw_only=True)


@dataclass
class LiteralDefinition(ServiceDefinition):
    instance: Any


@dataclass
class ClassDefinition(ServiceDefinition):
    class_name: str | type


@dataclass
class FactoryDefinition(ServiceDefinition):
    builder: Callable[..., Any]


@dataclass
class ComplexDefinition(ServiceDefinition):
    class_name: str | type
    arguments: list[Argument] = field(default_factory=list)
    calls: list[MethodCall] = field(default_factory=list)
    properties: list[PropertyAssignment] = field(default_factory=list)

    def get_parameter(self, position: int) -> Argument:
        if position < 0:
            msg = f"Position {position} is out of range for {len(self.arguments)} constructor argument(s)"
            raise DefinitionError(msg)
        try:
            return self.arguments[position]
        except IndexError:
            msg = f"{self.class_name!r} has no constructor argument at position {position}"
            raise DefinitionError(msg) from None

    def set_parameter(self, position: int, argument: Argument | Mapping[str, Any]) -> None:
        """Replace the constructor argument at `position`, or append it when `position` is one past the end."""
        value = argument_from_mapping(argument) if isinstance(argument, Mapping) else argument
        if position == len(self.arguments):
            self.arguments.append(value)
            return
        if not 0 <= position < len(self.arguments):
            msg = f"Position {position} is out of range for {len(self.arguments)} constructor argument(s)"
            raise DefinitionError(msg)
        self.arguments[position] = value


def make_definition(raw: object, *, shared: bool = False) -> ServiceDefinition:
    """Normalise any accepted registration style into a `ServiceDefinition`.

    - definition objects are copied (argument lists included), shared when
      either they or the caller say so
    - strings and classes are class definitions
    - functions, methods and partials are factories
    - mappings with a ``className`` key are complex definitions
    - everything else is a literal instance
    """
    if isinstance(raw, ServiceDefinition):
        return copy_definition(raw, shared=shared or raw.shared)

    if isinstance(raw, str) or inspect.isclass(raw):
        return ClassDefinition(raw, shared=shared)

    if inspect.isroutine(raw) or isinstance(raw, functools.partial):
        return FactoryDefinition(raw, shared=shared)

    if isinstance(raw, Mapping) and _class_name_key(raw) is not None:
        return complex_from_mapping(raw, shared=shared)

    return LiteralDefinition(raw, shared=shared)


def copy_definition(definition: ServiceDefinition, *, shared: bool) -> ServiceDefinition:
    """Copy a definition and its argument, call and property lists.

    Parameter values and literal instances are shared with the original.
    """
    if not isinstance(definition, ComplexDefinition):
        return dataclasses.replace(definition, shared=shared)

    return dataclasses.replace(
        definition,
        arguments=[_copy_argument(a) for a in definition.arguments],
        calls=[MethodCall(c.method, [_copy_argument(a) for a in c.arguments]) for c in definition.calls],
        properties=[PropertyAssignment(p.name, _copy_argument(p.value)) for p in definition.properties],
        shared=shared,
    )


def _copy_argument(argument: Argument) -> Argument:
    if isinstance(argument, InstanceSpec):
        return InstanceSpec(argument.class_name, [_copy_argument(a) for a in argument.arguments])
    return dataclasses.replace(argument)


def complex_from_mapping(raw: Mapping[str, Any], *, shared: bool = False) -> ComplexDefinition:
    key = _class_name_key(raw)
    if key is None:
        msg = "Invalid service definition: missing 'className'"
        raise DefinitionError(msg)

    calls = []
    for call in _list_of(raw, "calls"):
        if not isinstance(call, MethodCall):
            if not isinstance(call, Mapping) or "method" not in call:
                msg = f"Invalid method call {call!r}: expected a mapping with a 'method' key"
                raise DefinitionError(msg)
            call = MethodCall(call["method"], arguments_from_list(_list_of(call, "arguments")))  # noqa: PLW2901
        calls.append(call)

    properties = []
    for prop in _list_of(raw, "properties"):
        if not isinstance(prop, PropertyAssignment):
            if not isinstance(prop, Mapping) or "name" not in prop or "value" not in prop:
                msg = f"Invalid property {prop!r}: expected a mapping with 'name' and 'value' keys"
                raise DefinitionError(msg)
            prop = PropertyAssignment(prop["name"], _coerce_argument(prop["value"]))  # noqa: PLW2901
        properties.append(prop)

    return ComplexDefinition(
        raw[key],
        arguments=arguments_from_list(_list_of(raw, "arguments")),
        calls=calls,
        properties=properties,
        shared=shared or bool(raw.get("shared", False)),
    )


def argument_from_mapping(raw: Mapping[str, Any]) -> Argument:
    kind = raw.get("type")
    try:
        if kind == "parameter":
            return Parameter(raw["value"])
        if kind == "service":
            return ServiceReference(raw["name"])
    except KeyError as e:
        msg = f"Argument of type {kind!r} is missing the {e.args[0]!r} key"
        raise DefinitionError(msg) from e

    if kind == "instance":
        key = _class_name_key(raw)
        if key is None:
            msg = "Argument of type 'instance' is missing the 'className' key"
            raise DefinitionError(msg)
        return InstanceSpec(raw[key], arguments_from_list(_list_of(raw, "arguments")))

    msg = f"Unknown argument type {kind!r}; expected 'parameter', 'service' or 'instance'"
    raise DefinitionError(msg)


def arguments_from_list(raw: Sequence[Any]) -> list[Argument]:
    return [_coerce_argument(item) for item in raw]


def _coerce_argument(raw: object) -> Argument:
    if isinstance(raw, (Parameter, ServiceReference, InstanceSpec)):
        return raw
    if isinstance(raw, Mapping):
        return argument_from_mapping(raw)
    msg = f"Invalid argument {raw!r}: expected a mapping with a 'type' key"
    raise DefinitionError(msg)


def _list_of(raw: Mapping[str, Any], key: str) -> list[Any]:
    value = raw.get(key) or []
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        msg = f"'{key}' must be a list, got {type(value).__name__}"
        raise DefinitionError(msg)
    return list(value)


def _class_name_key(raw: Mapping[str, Any]) -> str | None:
    for key in ("className", "class_name"):
        if key in raw:
            return key
    return None
