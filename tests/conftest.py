import json
import types
from typing import Any, Dict, List, Optional

import pytest
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def make_tool_call(name: str, arguments: Any) -> types.SimpleNamespace:
    return types.SimpleNamespace(function=types.SimpleNamespace(name=name, arguments=arguments))


class DummyGroq:
    """
    Minimal mock for groq.Groq that supports:
    client.chat.completions.create(...)

    ``calls`` is a list of (name, args) pairs; args are JSON-encoded unless
    they are already strings, mirroring the real API.
    """

    def __init__(self, calls: Optional[List[tuple]] = None, error: Optional[Exception] = None):
        self._calls = calls or []
        self._error = error
        self.last_kwargs: Dict[str, Any] = {}
        self.chat = types.SimpleNamespace(
            completions=types.SimpleNamespace(create=self._create)
        )

    def _create(self, **kwargs):
        self.last_kwargs = kwargs
        if self._error is not None:
            raise self._error
        tool_calls = [
            make_tool_call(name, args if isinstance(args, str) else json.dumps(args))
            for name, args in self._calls
        ] or None
        message = types.SimpleNamespace(content=None, tool_calls=tool_calls)
        return types.SimpleNamespace(choices=[types.SimpleNamespace(message=message)])


class DummyOllama:
    """Minimal mock for ollama.Client supporting client.chat(...)."""

    def __init__(self, calls: Optional[List[tuple]] = None, error: Optional[Exception] = None):
        self._calls = calls or []
        self._error = error
        self.last_kwargs: Dict[str, Any] = {}

    def chat(self, **kwargs):
        self.last_kwargs = kwargs
        if self._error is not None:
            raise self._error
        tool_calls = [make_tool_call(name, args) for name, args in self._calls] or None
        return types.SimpleNamespace(message=types.SimpleNamespace(content="", tool_calls=tool_calls))


class DummyGateway:
    """Gateway test double returning canned requests."""

    def __init__(self, requests=None, error: Optional[Exception] = None):
        self.requests = list(requests or [])
        self.error = error
        self.seen: List[tuple] = []

    def request_tool_calls(self, prompt, catalog):
        self.seen.append((prompt, list(catalog)))
        if self.error is not None:
            raise self.error
        return list(self.requests)


@pytest.fixture(autouse=True)
def set_env(monkeypatch):
    """
    Pin backend env vars so a developer's .env never leaks into tests.
    """
    for name in (
        "TOOLCALL_BACKEND",
        "TOOLCALL_TEMPERATURE",
        "TOOLCALL_TIMEOUT",
        "OLLAMA_HOST",
        "OLLAMA_MODEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GROQ_MODEL", "dummy-model")
    monkeypatch.setenv("GROQ_API_KEY", "dummy-key")
    yield
