"""Dispatch of model-requested tool invocations."""

from __future__ import annotations

import asyncio
import concurrent.futures
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from toolcall.registry import ToolNotFoundError, ToolRegistry
from toolcall.tools import ToolSpec
from toolcall.validation import ValidationError, validate

logger = logging.getLogger(__name__)

UNKNOWN_TOOL = "UnknownTool"
INVALID_ARGUMENTS = "InvalidArguments"
EXECUTION_ERROR = "ExecutionError"


@dataclass(frozen=True, slots=True)
class InvocationRequest:
    """A single tool call as returned by the model."""

    name: str
    arguments: Any = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class InvocationFailure:
    """Why a request failed. ``reason`` carries the validation kind for ``InvalidArguments``."""

    kind: str
    detail: str = ""
    field: Optional[str] = None
    reason: Optional[str] = None
    expected: Optional[str] = None
    actual: Optional[str] = None


@dataclass(frozen=True, slots=True)
class InvocationResult:
    """Outcome of one request: a value on success, a failure otherwise."""

    request: InvocationRequest
    value: Any = None
    failure: Optional[InvocationFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


class _Prepared:
    """A request that passed lookup and validation, ready to run."""

    __slots__ = ("request", "spec", "args")

    def __init__(self, request: InvocationRequest, spec: ToolSpec, args: Dict[str, Any]) -> None:
        self.request = request
        self.spec = spec
        self.args = args


def _prepare(request: InvocationRequest, registry: ToolRegistry) -> _Prepared | InvocationResult:
    """Resolve and validate ``request``; return a failed result if either step fails."""
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Dispatching tool '%s' with args=%r", request.name, request.arguments)
    try:
        spec = registry.resolve(request.name)
    except ToolNotFoundError as exc:
        logger.warning("Model requested unknown tool '%s'", request.name)
        return InvocationResult(request=request, failure=InvocationFailure(UNKNOWN_TOOL, str(exc)))

    try:
        args = validate(spec.parameters, request.arguments)
    except ValidationError as exc:
        logger.warning("Rejected arguments for '%s': %s", request.name, exc)
        return InvocationResult(
            request=request,
            failure=InvocationFailure(
                INVALID_ARGUMENTS,
                f"{exc.kind}: {exc}",
                field=exc.field,
                reason=exc.kind,
                expected=exc.expected,
                actual=exc.actual,
            ),
        )
    return _Prepared(request, spec, args)


def _execution_failure(request: InvocationRequest, exc: BaseException) -> InvocationResult:
    logger.warning("Tool '%s' failed: %s", request.name, exc)
    detail = str(exc) or type(exc).__name__
    return InvocationResult(request=request, failure=InvocationFailure(EXECUTION_ERROR, detail))


async def _await_with_timeout(awaitable: Any, timeout: Optional[float]) -> Any:
    if timeout is None:
        return await awaitable
    return await asyncio.wait_for(awaitable, timeout)


def _call_sync(prepared: _Prepared, timeout: Optional[float]) -> Any:
    if timeout is None:
        value = prepared.spec.invoke(prepared.args)
    else:
        pool = concurrent.futures.ThreadPoolExecutor(max_workers=1)
        try:
            future = pool.submit(prepared.spec.invoke, prepared.args)
            value = future.result(timeout=timeout)
        finally:
            # Do not wait on a tool that overran its deadline.
            pool.shutdown(wait=False)
    if inspect.isawaitable(value):
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is None:
            return asyncio.run(_await_with_timeout(value, timeout))
        if inspect.iscoroutine(value):
            value.close()
        raise RuntimeError("async tool called inside a running event loop; use adispatch")
    return value


def _run_one(item: _Prepared | InvocationResult, timeout: Optional[float]) -> InvocationResult:
    if isinstance(item, InvocationResult):
        return item
    try:
        value = _call_sync(item, timeout)
    except (TimeoutError, asyncio.TimeoutError, concurrent.futures.TimeoutError) as exc:
        if timeout is not None:
            exc = TimeoutError(f"timed out after {timeout}s")
        return _execution_failure(item.request, exc)
    except Exception as exc:
        return _execution_failure(item.request, exc)
    return InvocationResult(request=item.request, value=value)


def dispatch(
    requests: Iterable[InvocationRequest],
    registry: ToolRegistry,
    *,
    timeout: Optional[float] = None,
) -> List[InvocationResult]:
    """
    Validate and execute each request in order.

    Every request yields exactly one result at the same position. Unknown
    tools, invalid arguments and tool exceptions become failed results;
    nothing raised by a tool escapes this function.

    Parameters
    ----------
    requests : Iterable[InvocationRequest]
        Calls returned by the model gateway.
    registry : ToolRegistry
        Registry the names are resolved against.
    timeout : float, optional
        Per-invocation limit in seconds. An overrun is reported as an
        ``ExecutionError`` result.

    Notes
    -----
    A tool returning an awaitable is run to completion with ``asyncio.run``.
    Call ``adispatch`` instead when already inside an event loop; there an
    async tool is reported as an ``ExecutionError`` without being run.

    A sync tool that overruns ``timeout`` is abandoned on its worker thread,
    not stopped. The interpreter still joins that thread at exit, so a tool
    that never returns keeps the process alive.
    """
    return [_run_one(_prepare(request, registry), timeout) for request in requests]


async def _arun_one(item: _Prepared | InvocationResult, timeout: Optional[float]) -> InvocationResult:
    if isinstance(item, InvocationResult):
        return item
    try:
        if inspect.iscoroutinefunction(item.spec.fn):
            value = await _await_with_timeout(item.spec.invoke(item.args), timeout)
        else:
            value = await _await_with_timeout(asyncio.to_thread(item.spec.invoke, item.args), timeout)
            if inspect.isawaitable(value):
                value = await _await_with_timeout(value, timeout)
    except asyncio.TimeoutError as exc:
        if timeout is not None:
            exc = TimeoutError(f"timed out after {timeout}s")
        return _execution_failure(item.request, exc)
    except Exception as exc:
        return _execution_failure(item.request, exc)
    return InvocationResult(request=item.request, value=value)


async def adispatch(
    requests: Iterable[InvocationRequest],
    registry: ToolRegistry,
    *,
    timeout: Optional[float] = None,
    concurrent: bool = False,
) -> List[InvocationResult]:
    """
    Async counterpart of ``dispatch``.

    With ``concurrent=True`` all validated invocations run together; results
    still come back in request order.
    """
    prepared = [_prepare(request, registry) for request in requests]
    if concurrent:
        return list(await asyncio.gather(*(_arun_one(item, timeout) for item in prepared)))
    results: List[InvocationResult] = []
    for item in prepared:
        results.append(await _arun_one(item, timeout))
    return results
