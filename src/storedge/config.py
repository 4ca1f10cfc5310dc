"""Configuration loading for applications embedding the client."""

import json
import pathlib

import pydantic

from .logs import get_logger
from .restapi import DEFAULT_TIMEOUT, ConfigurationError

logger = get_logger(__name__)


class ClientConfig(pydantic.BaseModel):
    """Connection settings for the storEDGE REST API."""

    model_config = pydantic.ConfigDict(frozen=True)

    base_url: str = pydantic.Field(
        description="Base URL for the API, including version prefix",
        min_length=1,
    )
    api_key: str = pydantic.Field(description="API access key", min_length=1)
    api_secret: str = pydantic.Field(description="API secret", min_length=1)
    timeout: float = pydantic.Field(
        DEFAULT_TIMEOUT,
        description="Request timeout in seconds",
        gt=0,
    )
    log_level: str = pydantic.Field("INFO", description="Logging level")

    @pydantic.field_validator("base_url")
    @classmethod
    def _normalize_base_url(cls, value: str) -> str:
        return value.rstrip("/") + "/"


def load_config(
    config_path: str | pathlib.Path,
    model: type[ClientConfig] = ClientConfig,
) -> ClientConfig:
    """Load configuration from a JSON file.

    Args:
        config_path: Path to the JSON file.
        model: Config class to validate against (a ``ClientConfig`` subclass).

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigurationError: If the content fails validation.
    """
    path = pathlib.Path(config_path)
    if not path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    with path.open("r") as f:
        data = json.load(f)

    try:
        config = model(**data)
    except pydantic.ValidationError as exc:
        msg = f"Invalid configuration in {config_path}: {exc}"
        raise ConfigurationError(msg) from exc

    logger.debug("Loaded configuration", path=str(path), base_url=config.base_url)
    return config
