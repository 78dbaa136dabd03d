"""
Command-line entry-point for the tool-calling demo.

Responsibilities
- Build the arithmetic tool registry
- Ask the configured model gateway which tools to call for a prompt
- Dispatch the requested calls and render the results as console lines
"""
from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from toolcall.config import DEFAULT_PROMPT, get_backend, load_gateway_config
from toolcall.dispatcher import InvocationRequest, InvocationResult, adispatch, dispatch
from toolcall.gateway import GatewayError, ModelGateway, build_gateway
from toolcall.registry import ToolRegistry
from toolcall.tools.arithmetic import build_arithmetic_registry

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RunOutcome:
    """Requests the model made for a prompt and what running them produced."""

    prompt: str
    requests: List[InvocationRequest] = field(default_factory=list)
    results: List[InvocationResult] = field(default_factory=list)


# --------------------------------------------------------------------------- #
# Rendering
# --------------------------------------------------------------------------- #

def format_request(request: InvocationRequest) -> str:
    return f"Tool: {request.name} Args: {request.arguments}"


def format_result(result: InvocationResult) -> str:
    request = result.request
    if result.ok:
        return f"Result for: {request.name} with: {request.arguments} = {result.value}"
    failure = result.failure
    return f"Error for: {request.name} with: {request.arguments}: {failure.kind}: {failure.detail}"


def render(outcome: RunOutcome) -> List[str]:
    """Detected calls first, then one line per result, in request order."""
    lines = [format_request(request) for request in outcome.requests]
    lines.extend(format_result(result) for result in outcome.results)
    return lines


# --------------------------------------------------------------------------- #
# Running prompts
# --------------------------------------------------------------------------- #

def run_prompt(
    prompt: str,
    gateway: ModelGateway,
    registry: ToolRegistry,
    *,
    timeout: Optional[float] = None,
) -> RunOutcome:
    """
    Send ``prompt`` with the registry catalog and dispatch the returned calls.

    Raises
    ------
    GatewayError
        If the gateway fails; no tool is invoked in that case.
    """
    requests = gateway.request_tool_calls(prompt, registry.catalog())
    results = dispatch(requests, registry, timeout=timeout)
    return RunOutcome(prompt=prompt, requests=list(requests), results=results)


async def arun_prompt(
    prompt: str,
    gateway: ModelGateway,
    registry: ToolRegistry,
    *,
    gateway_timeout: Optional[float] = None,
    timeout: Optional[float] = None,
    concurrent: bool = False,
) -> RunOutcome:
    """
    Async variant of ``run_prompt``.

    The blocking gateway call runs on a worker thread. If it is cancelled or
    exceeds ``gateway_timeout`` the error propagates and dispatch never starts.
    """
    call = asyncio.to_thread(gateway.request_tool_calls, prompt, registry.catalog())
    if gateway_timeout is None:
        requests = await call
    else:
        try:
            requests = await asyncio.wait_for(call, gateway_timeout)
        except asyncio.TimeoutError as exc:
            raise GatewayError(f"Model gateway timed out after {gateway_timeout}s") from exc
    results = await adispatch(requests, registry, timeout=timeout, concurrent=concurrent)
    return RunOutcome(prompt=prompt, requests=list(requests), results=results)


def build_default_gateway(backend: Optional[str] = None, client: Any = None) -> ModelGateway:
    backend = backend or get_backend()
    return build_gateway(load_gateway_config(backend), backend=backend, client=client)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the demo prompt (or the prompt given as arguments) and print the results."""
    logging.basicConfig(level=logging.INFO)
    args = list(sys.argv[1:] if argv is None else argv)
    prompt = " ".join(args) if args else DEFAULT_PROMPT

    registry = build_arithmetic_registry()
    try:
        gateway = build_default_gateway()
        outcome = run_prompt(prompt, gateway, registry)
    except (GatewayError, RuntimeError) as exc:
        logger.error("Could not get tool calls from the model: %s", exc)
        return 1

    if not outcome.requests:
        logger.info("The model did not request any tool calls.")
    for line in render(outcome):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
