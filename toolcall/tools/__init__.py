"""Tool specifications and catalog projections used by the dispatch core."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol, Tuple

#: Semantic parameter types a tool may declare.
PARAMETER_TYPES = ("number", "string", "boolean", "object", "array")


class ToolFn(Protocol):
    """Callable signature every tool implementation must follow."""

    def __call__(self, args: Dict[str, Any]) -> Any:
        ...


@dataclass(frozen=True, slots=True)
class ParameterSpec:
    """A single named argument accepted by a tool."""

    name: str
    type: str
    description: str = ""
    required: bool = True

    def __post_init__(self) -> None:
        if self.type not in PARAMETER_TYPES:
            raise ValueError(
                f"Parameter '{self.name}' has unsupported type '{self.type}'. "
                f"Expected one of: {', '.join(PARAMETER_TYPES)}."
            )


@dataclass(frozen=True, slots=True)
class ToolCatalogEntry:
    """Serializable view of a tool, as presented to the model."""

    name: str
    description: str
    parameters: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }

    def to_function_tool(self) -> Dict[str, Any]:
        """Wrap the entry in the ``{"type": "function"}`` envelope chat APIs expect."""
        return {"type": "function", "function": self.to_dict()}


@dataclass(frozen=True, slots=True)
class ToolSpec:
    """Metadata wrapper used by the dispatcher to invoke tools in a uniform way."""

    name: str
    fn: ToolFn
    description: str = ""
    parameters: Tuple[ParameterSpec, ...] = ()

    def __post_init__(self) -> None:
        # Parameters are fixed once the tool exists.
        params = tuple(self.parameters)
        seen: set[str] = set()
        for param in params:
            if param.name in seen:
                raise ValueError(f"Tool '{self.name}' declares parameter '{param.name}' twice.")
            seen.add(param.name)
        object.__setattr__(self, "parameters", params)

    def invoke(self, args: Dict[str, Any]) -> Any:
        """Run the tool with already validated arguments."""
        return self.fn(args)

    def json_schema(self) -> Dict[str, Any]:
        """Render the parameter list as a JSON-schema object."""
        properties = {
            param.name: {"type": param.type, "description": param.description}
            for param in self.parameters
        }
        required: List[str] = [param.name for param in self.parameters if param.required]
        return {"type": "object", "properties": properties, "required": required}

    def catalog_entry(self) -> ToolCatalogEntry:
        return ToolCatalogEntry(
            name=self.name,
            description=self.description,
            parameters=self.json_schema(),
        )


def tool(
    name: Optional[str] = None,
    *,
    description: Optional[str] = None,
    parameters: Iterable[ParameterSpec] = (),
) -> Callable[[ToolFn], ToolSpec]:
    """
    Decorator turning a plain function into a ``ToolSpec``.

    The function name and first docstring line are used when ``name`` or
    ``description`` are omitted.

    Examples
    --------
    >>> @tool(parameters=[ParameterSpec("a", "number")])
    ... def double(args):
    ...     "Double a number."
    ...     return args["a"] * 2
    >>> double.name, double.description
    ('double', 'Double a number.')
    """

    def wrap(fn: ToolFn) -> ToolSpec:
        doc = (getattr(fn, "__doc__", None) or "").strip()
        return ToolSpec(
            name=name or fn.__name__,
            fn=fn,
            description=description if description is not None else doc.splitlines()[0] if doc else "",
            parameters=tuple(parameters),
        )

    return wrap


__all__ = [
    "PARAMETER_TYPES",
    "ParameterSpec",
    "ToolCatalogEntry",
    "ToolFn",
    "ToolSpec",
    "tool",
]
