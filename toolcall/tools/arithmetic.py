"""Arithmetic tools exposed to the model in the demo."""

from __future__ import annotations

from typing import Any, Dict

from toolcall.registry import ToolRegistry
from toolcall.tools import ParameterSpec, ToolSpec, tool

CALCULATION_PARAMETERS = (
    ParameterSpec(name="a", type="number", description="first number"),
    ParameterSpec(name="b", type="number", description="second number"),
)


@tool(description="Add numbers.", parameters=CALCULATION_PARAMETERS)
def addition(args: Dict[str, Any]) -> float:
    return args["a"] + args["b"]


@tool(description="Multiply numbers.", parameters=CALCULATION_PARAMETERS)
def multiplication(args: Dict[str, Any]) -> float:
    return args["a"] * args["b"]


ARITHMETIC_TOOLS: tuple[ToolSpec, ...] = (addition, multiplication)


def build_arithmetic_registry() -> ToolRegistry:
    """Return a registry holding ``addition`` then ``multiplication``."""
    registry = ToolRegistry()
    for spec in ARITHMETIC_TOOLS:
        registry.register(spec)
    return registry
