"""Model gateways: send a prompt plus tool catalog, get back requested calls."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence

import ollama
from groq import Groq

from toolcall.dispatcher import InvocationRequest
from toolcall.tools import ToolCatalogEntry

logger = logging.getLogger(__name__)


class GatewayError(RuntimeError):
    """The model backend could not produce a list of tool calls."""


@dataclass(frozen=True, slots=True)
class GatewayConfig:
    """Connection and sampling settings for a model backend."""

    model: str
    host: Optional[str] = None
    temperature: float = 0.0
    timeout: Optional[float] = None
    api_key: Optional[str] = None


class ModelGateway(Protocol):
    """Anything that can turn a prompt and a catalog into tool calls."""

    def request_tool_calls(
        self, prompt: str, catalog: Sequence[ToolCatalogEntry]
    ) -> List[InvocationRequest]:
        ...


def _user_messages(prompt: str) -> List[Dict[str, str]]:
    return [{"role": "user", "content": prompt}]


def _field(obj: Any, name: str) -> Any:
    """Read ``name`` from a client response object or a plain dict."""
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _decode_arguments(raw: Any) -> Any:
    """
    Turn a backend argument payload into a mapping where possible.

    Text that is not valid JSON is returned unchanged so argument validation
    reports it instead of the gateway.
    """
    if raw is None:
        return {}
    if isinstance(raw, str):
        if not raw.strip():
            return {}
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Model returned undecodable tool arguments: %r", raw)
            return raw
    return raw


def _to_requests(tool_calls: Any) -> List[InvocationRequest]:
    requests: List[InvocationRequest] = []
    for call in tool_calls or []:
        function = _field(call, "function") or {}
        arguments = _decode_arguments(_field(function, "arguments"))
        # Ollama hands back its own Mapping type; normalise to a dict.
        if hasattr(arguments, "items") and not isinstance(arguments, dict):
            arguments = dict(arguments.items())
        requests.append(InvocationRequest(name=_field(function, "name") or "", arguments=arguments))
    return requests


class OllamaGateway:
    """Gateway backed by a local Ollama server."""

    def __init__(self, config: GatewayConfig, client: Any = None) -> None:
        self.config = config
        self._client = client

    def _build_client(self) -> Any:
        if self._client is not None:
            return self._client
        kwargs: Dict[str, Any] = {}
        if self.config.timeout is not None:
            kwargs["timeout"] = self.config.timeout
        self._client = ollama.Client(host=self.config.host, **kwargs)
        return self._client

    def request_tool_calls(
        self, prompt: str, catalog: Sequence[ToolCatalogEntry]
    ) -> List[InvocationRequest]:
        client = self._build_client()
        try:
            response = client.chat(
                model=self.config.model,
                messages=_user_messages(prompt),
                tools=[entry.to_function_tool() for entry in catalog],
                options={"temperature": self.config.temperature},
            )
        except Exception as exc:
            raise GatewayError(f"Ollama request failed: {exc}") from exc

        message = _field(response, "message")
        requests = _to_requests(_field(message, "tool_calls"))
        logger.info("Ollama model '%s' requested %d tool call(s)", self.config.model, len(requests))
        return requests


class GroqGateway:
    """Gateway backed by the Groq chat completions API."""

    def __init__(self, config: GatewayConfig, client: Any = None) -> None:
        self.config = config
        self._client = client

    def _build_client(self) -> Any:
        """Return a Groq client (or reuse injected mock)."""
        if self._client is not None:
            return self._client
        kwargs: Dict[str, Any] = {}
        if self.config.api_key:
            kwargs["api_key"] = self.config.api_key
        if self.config.timeout is not None:
            kwargs["timeout"] = self.config.timeout
        self._client = Groq(**kwargs)
        return self._client

    def request_tool_calls(
        self, prompt: str, catalog: Sequence[ToolCatalogEntry]
    ) -> List[InvocationRequest]:
        client = self._build_client()
        try:
            completion = client.chat.completions.create(
                model=self.config.model,
                messages=_user_messages(prompt),
                tools=[entry.to_function_tool() for entry in catalog],
                tool_choice="auto",
                temperature=self.config.temperature,
            )
        except Exception as exc:
            raise GatewayError(f"Groq request failed: {exc}") from exc

        choices = _field(completion, "choices") or []
        if not choices:
            return []
        message = _field(choices[0], "message")
        requests = _to_requests(_field(message, "tool_calls"))
        logger.info("Groq model '%s' requested %d tool call(s)", self.config.model, len(requests))
        return requests


GATEWAYS = {
    "ollama": OllamaGateway,
    "groq": GroqGateway,
}


def build_gateway(config: GatewayConfig, backend: str = "ollama", client: Any = None) -> ModelGateway:
    try:
        gateway_cls = GATEWAYS[backend]
    except KeyError as exc:
        raise ValueError(f"Unknown backend '{backend}'. Expected one of: {', '.join(GATEWAYS)}.") from exc
    return gateway_cls(config, client=client)
