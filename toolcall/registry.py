"""In-memory tool registry preserving registration order."""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List

from toolcall.tools import ToolCatalogEntry, ToolSpec

logger = logging.getLogger(__name__)


class ToolRegistryError(LookupError):
    """Base class for registry failures."""

    def __init__(self, name: str, message: str) -> None:
        super().__init__(message)
        self.name = name


class DuplicateToolError(ToolRegistryError):
    def __init__(self, name: str) -> None:
        super().__init__(name, f"Tool '{name}' is already registered.")


class ToolNotFoundError(ToolRegistryError):
    def __init__(self, name: str) -> None:
        super().__init__(name, f"Tool '{name}' is not registered.")


class ToolRegistry:
    """
    Named tool definitions, resolved by name during dispatch.

    Registration is expected to happen once at startup; nothing here removes
    or replaces a tool, so lookups need no locking once dispatch begins.
    """

    def __init__(self) -> None:
        self._tools: Dict[str, ToolSpec] = {}

    def register(self, spec: ToolSpec) -> None:
        """
        Add a tool definition.

        Raises
        ------
        DuplicateToolError
            If a tool with the same name is already registered. The existing
            definition is left untouched.
        """
        if spec.name in self._tools:
            raise DuplicateToolError(spec.name)
        self._tools[spec.name] = spec
        logger.debug("Registered tool '%s' (%d parameters)", spec.name, len(spec.parameters))

    def resolve(self, name: str) -> ToolSpec:
        try:
            return self._tools[name]
        except (KeyError, TypeError) as exc:
            # TypeError: unhashable names from untrusted gateway output.
            raise ToolNotFoundError(str(name)) from exc

    def catalog(self) -> List[ToolCatalogEntry]:
        """Return catalog entries in registration order."""
        return [spec.catalog_entry() for spec in self._tools.values()]

    def names(self) -> tuple[str, ...]:
        return tuple(self._tools.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[ToolSpec]:
        return iter(self._tools.values())
