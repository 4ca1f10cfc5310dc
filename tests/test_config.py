"""Tests for configuration loading and client construction from config."""

import json

import httpx
import pydantic
import pytest

from storedge import config
from storedge.restapi import ConfigurationError, StoredgeClient


def _write_config(tmp_path, data: dict):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data))
    return path


def test_client_config_defaults():
    """Timeout and log level have defaults."""
    cfg = config.ClientConfig(
        base_url="https://api.example.com/v1",
        api_key="key",
        api_secret="secret",
    )
    assert cfg.timeout == 10.0
    assert cfg.log_level == "INFO"


def test_client_config_normalizes_base_url():
    """The base URL ends with exactly one slash."""
    cfg = config.ClientConfig(
        base_url="https://api.example.com/v1//",
        api_key="key",
        api_secret="secret",
    )
    assert cfg.base_url == "https://api.example.com/v1/"


def test_client_config_is_immutable():
    """Assigning to a field after construction fails."""
    cfg = config.ClientConfig(
        base_url="https://api.example.com/v1",
        api_key="key",
        api_secret="secret",
    )
    with pytest.raises(pydantic.ValidationError):
        cfg.api_key = "other"


def test_client_config_rejects_empty_secret():
    """Empty credentials fail validation."""
    with pytest.raises(pydantic.ValidationError):
        config.ClientConfig(base_url="https://x", api_key="key", api_secret="")


def test_load_config_reads_json(tmp_path):
    """A valid JSON file loads into ClientConfig."""
    path = _write_config(
        tmp_path,
        {
            "base_url": "https://api.example.com/v1",
            "api_key": "key",
            "api_secret": "secret",
            "timeout": 5,
        },
    )
    cfg = config.load_config(path)
    assert cfg.base_url == "https://api.example.com/v1/"
    assert cfg.timeout == 5.0


def test_load_config_missing_file_raises(tmp_path):
    """A missing file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError, match="not found"):
        config.load_config(tmp_path / "missing.json")


def test_load_config_invalid_content_raises_configuration_error(tmp_path):
    """Validation failures surface as ConfigurationError."""
    path = _write_config(tmp_path, {"base_url": "https://x", "timeout": -1})
    with pytest.raises(ConfigurationError, match="Invalid configuration") as exc_info:
        config.load_config(path)
    assert isinstance(exc_info.value.__cause__, pydantic.ValidationError)


def test_client_from_config():
    """StoredgeClient.from_config copies every setting."""
    cfg = config.ClientConfig(
        base_url="https://api.example.com/v1",
        api_key="key",
        api_secret="secret",
        timeout=3.5,
    )
    client = StoredgeClient.from_config(cfg, transport=httpx.MockTransport(None))
    assert client.base_url == "https://api.example.com/v1/"
    assert client.api_key == "key"
    assert client.api_secret == "secret"
    assert client.timeout == 3.5
