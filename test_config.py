"""Tests for environment configuration."""

import logging

import pytest

from query_gateway.config import load_config
from query_gateway.core.models import IndexConfig
from query_gateway.logger import configure_logging, log

ENV_NAMES = (
    "ES_HOST",
    "ES_INDICES",
    "ES_ARRAY_CONFIG",
    "ARBORIST_ENDPOINT",
    "AUTH_FILTER_FIELD",
    "SCROLL_PAGE_SIZE",
    "SCROLL_BATCH_SIZE",
    "LOG_LEVEL",
    "API_HOST",
    "API_PORT",
)


@pytest.fixture
def env_file(tmp_path, monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    path = tmp_path / ".env"
    path.write_text("")
    return str(path)


def test_defaults(env_file):
    config = load_config(env_file)
    assert config.es_host == "http://localhost:9200"
    assert config.indices == []
    assert config.arborist_endpoint is None
    assert config.scroll_page_size == 10000


def test_reads_environment(env_file, monkeypatch):
    monkeypatch.setenv("ES_HOST", "http://es:9200")
    monkeypatch.setenv("ES_INDICES", '[{"index": "subject_idx", "type": "subject"}]')
    monkeypatch.setenv("ES_ARRAY_CONFIG", '{"subject_idx": ["tags"]}')
    monkeypatch.setenv("SCROLL_PAGE_SIZE", "500")

    config = load_config(env_file)
    assert config.es_host == "http://es:9200"
    assert config.indices == [IndexConfig(index="subject_idx", type="subject")]
    assert config.array_fields == {"subject_idx": ["tags"]}
    assert config.scroll_page_size == 500


def test_reads_env_file(env_file, monkeypatch):
    with open(env_file, "w") as f:
        f.write("ARBORIST_ENDPOINT=http://arborist\n")
    # Registers the variable for cleanup; load_dotenv sets it for real
    monkeypatch.setenv("ARBORIST_ENDPOINT", "")
    monkeypatch.delenv("ARBORIST_ENDPOINT")

    assert load_config(env_file).arborist_endpoint == "http://arborist"


def test_invalid_json_is_rejected(env_file, monkeypatch):
    monkeypatch.setenv("ES_INDICES", "[not json")
    with pytest.raises(ValueError, match="ES_INDICES"):
        load_config(env_file)


def test_invalid_value_is_rejected(env_file, monkeypatch):
    monkeypatch.setenv("SCROLL_PAGE_SIZE", "many")
    with pytest.raises(ValueError, match="Invalid gateway configuration"):
        load_config(env_file)


def test_configure_logging_replaces_handlers():
    configure_logging("debug")
    configure_logging("warning")
    assert len(log.handlers) == 1
    assert log.level == logging.WARNING
    assert logging.getLogger("query_gateway.orchestrator").getEffectiveLevel() == logging.WARNING
