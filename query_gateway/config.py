"""
Gateway configuration loaded from the environment.

Values come from environment variables, with a ``.env`` file loaded first.
"""

import json
import os
from typing import Dict, List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from query_gateway.core.models import IndexConfig
from query_gateway.execution.executor import SCROLL_PAGE_SIZE


class GatewayConfig(BaseModel):
    """Process configuration."""

    es_host: str = "http://localhost:9200"
    indices: List[IndexConfig] = Field(default_factory=list)
    array_fields: Dict[str, List[str]] = Field(default_factory=dict)
    arborist_endpoint: Optional[str] = None
    auth_filter_field: str = "auth_resource_path"
    scroll_page_size: int = SCROLL_PAGE_SIZE
    scroll_batch_size: int = 1000
    log_level: str = "INFO"
    api_host: str = "0.0.0.0"
    api_port: int = 8000


def _json_env(name: str, default):
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"{name} is not valid JSON: {e}") from e


def load_config(env_file: Optional[str] = None) -> GatewayConfig:
    """
    Build the configuration from the environment.

    Args:
        env_file: Path of the .env file (defaults to searching upwards from cwd)

    Returns:
        Validated configuration

    Raises:
        ValueError: If a variable is malformed
    """
    load_dotenv(env_file)

    values = {
        "indices": _json_env("ES_INDICES", []),
        "array_fields": _json_env("ES_ARRAY_CONFIG", {}),
    }
    for key, env_name in (
        ("es_host", "ES_HOST"),
        ("arborist_endpoint", "ARBORIST_ENDPOINT"),
        ("auth_filter_field", "AUTH_FILTER_FIELD"),
        ("scroll_page_size", "SCROLL_PAGE_SIZE"),
        ("scroll_batch_size", "SCROLL_BATCH_SIZE"),
        ("log_level", "LOG_LEVEL"),
        ("api_host", "API_HOST"),
        ("api_port", "API_PORT"),
    ):
        value = os.getenv(env_name)
        if value:
            values[key] = value

    try:
        return GatewayConfig(**values)
    except ValidationError as e:
        raise ValueError(f"Invalid gateway configuration: {e}") from e
