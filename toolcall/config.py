"""
Central configuration for the tool-calling runner.
Loads environment variables from a .env file at import time.
"""
from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv

from toolcall.gateway import GatewayConfig

# --- Load .env early so everything importing config sees the vars ---
load_dotenv()

#: Environment variable names
BACKEND_ENV = "TOOLCALL_BACKEND"
TEMPERATURE_ENV = "TOOLCALL_TEMPERATURE"
TIMEOUT_ENV = "TOOLCALL_TIMEOUT"
OLLAMA_HOST_ENV = "OLLAMA_HOST"
OLLAMA_MODEL_ENV = "OLLAMA_MODEL"
GROQ_API_KEY_ENV = "GROQ_API_KEY"
GROQ_MODEL_ENV = "GROQ_MODEL"

#: Defaults matching a small local Ollama install.
DEFAULT_BACKEND = "ollama"
DEFAULT_OLLAMA_HOST = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "qwen2.5:0.5b"
DEFAULT_TEMPERATURE = 0.0

#: Prompt sent when none is given on the command line.
DEFAULT_PROMPT = "Add 30 and 12. Then multiply 21 by 2."


def require_env(var_name: str) -> str:
    """
    Return the value of an environment variable or raise a clear error.

    Raises
    ------
    RuntimeError
        If the environment variable is missing or empty.
    """
    try:
        value = os.environ[var_name]
    except KeyError as exc:
        raise RuntimeError(f"Required environment variable '{var_name}' is not set.") from exc
    if not value:
        raise RuntimeError(f"Environment variable '{var_name}' is empty.")
    return value


def _float_env(var_name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(var_name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable '{var_name}' must be a number, got '{raw}'.") from exc


def get_backend() -> str:
    return (os.getenv(BACKEND_ENV, "") or DEFAULT_BACKEND).strip().lower()


def load_gateway_config(backend: Optional[str] = None) -> GatewayConfig:
    """
    Build the gateway configuration for ``backend`` from the environment.

    Groq needs ``GROQ_API_KEY`` and ``GROQ_MODEL``; Ollama falls back to the
    local defaults above.
    """
    backend = backend or get_backend()
    temperature = _float_env(TEMPERATURE_ENV, DEFAULT_TEMPERATURE)
    timeout = _float_env(TIMEOUT_ENV, None)

    if backend == "groq":
        return GatewayConfig(
            model=require_env(GROQ_MODEL_ENV),
            api_key=require_env(GROQ_API_KEY_ENV),
            temperature=temperature,
            timeout=timeout,
        )
    if backend == "ollama":
        return GatewayConfig(
            model=os.getenv(OLLAMA_MODEL_ENV) or DEFAULT_OLLAMA_MODEL,
            host=os.getenv(OLLAMA_HOST_ENV) or DEFAULT_OLLAMA_HOST,
            temperature=temperature,
            timeout=timeout,
        )
    raise RuntimeError(f"Unsupported backend '{backend}'. Use 'ollama' or 'groq'.")
