import pytest

from toolcall import config


def test_ollama_defaults():
    cfg = config.load_gateway_config()

    assert config.get_backend() == "ollama"
    assert cfg.model == "qwen2.5:0.5b"
    assert cfg.host == "http://localhost:11434"
    assert cfg.temperature == 0.0
    assert cfg.timeout is None


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("OLLAMA_MODEL", "llama3.2:1b")
    monkeypatch.setenv("TOOLCALL_TEMPERATURE", "0.3")
    monkeypatch.setenv("TOOLCALL_TIMEOUT", "12")

    cfg = config.load_gateway_config("ollama")

    assert cfg.model == "llama3.2:1b"
    assert cfg.temperature == 0.3
    assert cfg.timeout == 12.0


def test_groq_requires_key_and_model(monkeypatch):
    monkeypatch.setenv("TOOLCALL_BACKEND", "Groq")
    cfg = config.load_gateway_config()
    assert (cfg.model, cfg.api_key) == ("dummy-model", "dummy-key")

    monkeypatch.delenv("GROQ_API_KEY")
    with pytest.raises(RuntimeError, match="GROQ_API_KEY"):
        config.load_gateway_config()


def test_bad_numbers_and_backends_raise(monkeypatch):
    monkeypatch.setenv("TOOLCALL_TIMEOUT", "soon")
    with pytest.raises(RuntimeError, match="TOOLCALL_TIMEOUT"):
        config.load_gateway_config("ollama")

    monkeypatch.delenv("TOOLCALL_TIMEOUT")
    with pytest.raises(RuntimeError, match="Unsupported backend"):
        config.load_gateway_config("bedrock")


def test_require_env_rejects_empty(monkeypatch):
    monkeypatch.setenv("EMPTY_VAR", "")
    with pytest.raises(RuntimeError):
        config.require_env("EMPTY_VAR")
