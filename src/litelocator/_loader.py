from __future__ import annotations

import builtins
import importlib
import inspect
import logging
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from ._errors import ClassNotFound


if TYPE_CHECKING:
    from collections.abc import Callable, Mapping


logger = logging.getLogger(__name__)


@runtime_checkable
class ClassLoader(Protocol):
    """Turns a class name into something that can be called to build an object."""

    def resolve(self, class_name: str | type) -> Callable[..., Any]: ...

    def is_known(self, class_name: str | type) -> bool: ...


class ImportLoader:
    """Default class loader.

    Lookup order:
    1. classes and other callables are returned as given
    2. `aliases` (bare name -> callable or import path)
    3. import paths, ``"package.module:Outer.Inner"`` or ``"package.module.Name"``
    4. classes from `builtins` for bare names
    """

    def __init__(self, aliases: Mapping[str, Callable[..., Any] | str] | None = None) -> None:
        self._aliases: dict[str, Callable[..., Any] | str] = dict(aliases or {})

    def alias(self, name: str, target: Callable[..., Any] | str) -> None:
        self._aliases[name] = target

    def is_known(self, class_name: str | type) -> bool:
        try:
            self.resolve(class_name)
        except ClassNotFound:
            return False
        return True

    def resolve(self, class_name: str | type) -> Callable[..., Any]:
        if not isinstance(class_name, str):
            if callable(class_name):
                return class_name
            raise ClassNotFound(class_name, "not a class name nor a callable")

        target: object = self._aliases.get(class_name, class_name)
        if not isinstance(target, str):
            return self._ensure_callable(class_name, target)

        if ":" in target or "." in target:
            return self._ensure_callable(class_name, self._import(target))

        found = getattr(builtins, target, None)
        if inspect.isclass(found):
            return found

        raise ClassNotFound(class_name)

    def _import(self, path: str) -> object:
        if ":" in path:
            module_name, _, qualname = path.partition(":")
        else:
            module_name, _, qualname = path.rpartition(".")

        if not module_name or not qualname:
            raise ClassNotFound(path, "expected 'module:Name' or 'module.Name'")

        try:
            obj: object = importlib.import_module(module_name)
        except ImportError as e:
            raise ClassNotFound(path, f"cannot import module {module_name!r} ({e})") from e

        for attr in qualname.split("."):
            try:
                obj = getattr(obj, attr)
            except AttributeError as e:
                raise ClassNotFound(path, f"{module_name!r} has no attribute {qualname!r}") from e

        logger.debug("Loaded %r from %r", qualname, module_name)
        return obj

    def _ensure_callable(self, class_name: str, target: object) -> Callable[..., Any]:
        if not callable(target):
            raise ClassNotFound(class_name, f"{type(target).__name__} object is not constructible")
        return target
