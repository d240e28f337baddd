from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Sequence


class ResolutionError(RuntimeError):
    pass


class ServiceNotFound(ResolutionError, KeyError):  # noqa: N818
    def __init__(self, name: str) -> None:
        super().__init__(f"Service {name!r} is not registered and is not a known class")
        self.name = name

    def __str__(self) -> str:
        # KeyError would quote the message
        return str(self.args[0])


class ClassNotFound(ResolutionError):  # noqa: N818
    def __init__(self, class_name: object, reason: str = "") -> None:
        msg = f"Class {class_name!r} cannot be found"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
        self.class_name = class_name


class ConstructorArityMismatch(ResolutionError, TypeError):  # noqa: N818
    pass


class UnresolvableArgumentReference(ResolutionError):  # noqa: N818
    def __init__(self, name: str) -> None:
        super().__init__(f"Argument references service {name!r}, which is not registered")
        self.name = name


class CircularDependency(ResolutionError):  # noqa: N818
    def __init__(self, chain: Sequence[str]) -> None:
        self.chain = tuple(chain)
        super().__init__(f"Circular dependency detected: {' -> '.join(self.chain)}")


class ResolutionAborted(ResolutionError):  # noqa: N818
    def __init__(self, name: str) -> None:
        super().__init__(f"Resolution of service {name!r} was stopped by the events manager")
        self.name = name


class DefinitionError(ValueError):
    pass
