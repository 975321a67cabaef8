import json
import logging

import pytest

from utils.config import DEFAULT_LOOKUP_PATH, DEFAULT_SCHEMA_PATH, Settings
from utils.errors import AppError, InvalidInputError, SchemaLoadError
from utils.logging import JsonFormatter

ENV_KEYS = ["BT_SCHEMA_PATH", "BT_LOOKUP_PATH", "BT_LOG_LEVEL", "BT_LOG_JSON", "BT_STRICT_LOOKUP"]


@pytest.fixture
def clean_env(monkeypatch):
    for k in ENV_KEYS:
        monkeypatch.delenv(k, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    s = Settings.from_env()
    assert s.schema_path == DEFAULT_SCHEMA_PATH
    assert s.lookup_path == DEFAULT_LOOKUP_PATH
    assert s.log_level == "INFO"
    assert s.log_json is False
    assert s.strict_lookup is False


def test_env_overrides(clean_env):
    clean_env.setenv("BT_SCHEMA_PATH", " conf/schema.yaml ")
    clean_env.setenv("BT_LOG_LEVEL", "DEBUG")
    clean_env.setenv("BT_LOG_JSON", "yes")
    clean_env.setenv("BT_STRICT_LOOKUP", "1")
    s = Settings.from_env()
    assert s.schema_path == "conf/schema.yaml"
    assert s.log_level == "DEBUG"
    assert s.log_json is True
    assert s.strict_lookup is True


def test_blank_env_falls_back(clean_env):
    clean_env.setenv("BT_LOOKUP_PATH", "   ")
    clean_env.setenv("BT_LOG_JSON", "off")
    s = Settings.from_env()
    assert s.lookup_path == DEFAULT_LOOKUP_PATH
    assert s.log_json is False


def test_error_hierarchy():
    assert issubclass(InvalidInputError, AppError)
    assert issubclass(InvalidInputError, TypeError)
    assert issubclass(SchemaLoadError, AppError)


def test_json_formatter_carries_extras():
    record = logging.LogRecord("scoring.dispatch", logging.WARNING, __file__, 1,
                               "unsupported %s", ("vfq",), None)
    record.instrument_id = "vfq"
    payload = json.loads(JsonFormatter().format(record))
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "scoring.dispatch"
    assert payload["msg"] == "unsupported vfq"
    assert payload["instrument_id"] == "vfq"
