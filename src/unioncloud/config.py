"""Configuration and logging setup for the UnionCloud client."""

import json
import logging
import os
import pathlib
from typing import Any

import pydantic
import structlog

from . import restapi

CONFIG_ENV_VAR = "UNIONCLOUD_CONFIG_PATH"
logger = structlog.get_logger(__name__)


class ClientConfig(pydantic.BaseModel):
    """Configuration for a UnionCloud client.

    Credentials are deliberately absent; they are passed to
    ``authenticate`` by the caller and never stored.
    """

    host: str = pydantic.Field(description="UnionCloud host name", min_length=1)
    api_version: str = pydantic.Field(
        restapi.DEFAULT_API_VERSION,
        description="Value of the accept-version header",
    )
    timeout: float = pydantic.Field(
        restapi.DEFAULT_TIMEOUT,
        description="Connection timeout in seconds",
        gt=0,
    )
    ca_bundle: str | None = pydantic.Field(
        None,
        description="PEM bundle pinning the service's certificate authorities",
    )
    include_debug_info: bool = pydantic.Field(
        False,  # noqa: FBT003
        description="Merge a request trace block into every response",
    )
    options: dict[str, Any] = pydantic.Field(
        default_factory=dict,
        description="Extra client options passed through untouched",
    )
    log_level: str = pydantic.Field("INFO", description="Logging level")


def configure_logging(log_level_name: str) -> None:
    """Configure structlog for logfmt output."""
    log_level = getattr(logging, log_level_name.upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.EventRenamer("msg"),
            structlog.processors.format_exc_info,
            structlog.processors.LogfmtRenderer(
                key_order=("timestamp", "level", "msg"),
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def load_config(config_path: str) -> ClientConfig:
    """Load client configuration from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a JSON object or fails validation;
            the message names the file.
    """
    path = pathlib.Path(config_path)
    if not path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    try:
        data = json.loads(path.read_text())
    except ValueError as e:
        msg = f"Configuration file {config_path} is not valid JSON: {e}"
        raise ValueError(msg) from e
    if not isinstance(data, dict):
        msg = f"Configuration file {config_path} must contain a JSON object"
        raise ValueError(msg)

    try:
        return ClientConfig.model_validate(data)
    except pydantic.ValidationError as e:
        msg = f"Invalid configuration in {config_path}: {e}"
        raise ValueError(msg) from e


def create_client(config: ClientConfig) -> restapi.UnionCloudClient:
    """Construct a client from validated config."""
    options = dict(config.options)
    options["include_debug_info"] = config.include_debug_info
    client = restapi.UnionCloudClient(
        host=config.host,
        options=options,
        api_version=config.api_version,
        timeout=config.timeout,
        ca_bundle=config.ca_bundle,
    )
    logger.info("Created UnionCloud client", host=config.host)
    return client


def client_from_env(config_path: str | None = None) -> restapi.UnionCloudClient:
    """Create a client using a config path or the environment default."""
    resolved_path = config_path or os.environ.get(CONFIG_ENV_VAR, "unioncloud.json")
    config = load_config(resolved_path)
    configure_logging(config.log_level)
    return create_client(config)
