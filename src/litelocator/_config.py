from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ._definition import make_definition
from ._errors import DefinitionError


if TYPE_CHECKING:
    import os

    from ._definition import ServiceDefinition


logger = logging.getLogger(__name__)


def definitions_from_mapping(services: Mapping[str, Any]) -> dict[str, ServiceDefinition]:
    """Build definitions for every ``name -> raw definition`` entry.

    Complex entries may carry ``shared = true``; other entries are registered
    non-shared.
    """
    if not isinstance(services, Mapping):
        msg = f"Service configuration must be a mapping, got {type(services).__name__}"
        raise DefinitionError(msg)

    definitions = {}
    for name, raw in services.items():
        if isinstance(raw, Mapping) and "className" not in raw and "class_name" not in raw:
            msg = f"Service {name!r} is missing 'className'"
            raise DefinitionError(msg)
        definitions[name] = make_definition(raw)
    return definitions


def read_toml(path: str | os.PathLike[str]) -> dict[str, Any]:
    with Path(path).open("rb") as fh:
        data = tomllib.load(fh)
    logger.debug("Read %d service definition(s) from %s", len(data), path)
    return data
