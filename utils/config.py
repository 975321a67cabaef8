from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_SCHEMA_PATH = "data/instruments_config.json"
DEFAULT_LOOKUP_PATH = "data/master.csv"


def _env_str(key: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(key)
    if v is None:
        return default
    v = v.strip()
    return v if v else default


def _env_bool(key: str, default: bool) -> bool:
    v = _env_str(key)
    if v is None:
        return default
    return v.lower() in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class Settings:
    # Bundled data
    schema_path: str
    lookup_path: str

    # Logging
    log_level: str
    log_json: bool

    # Missing lookup keys: warn only (False) or stop rendering (True)
    strict_lookup: bool

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            schema_path=_env_str("BT_SCHEMA_PATH", DEFAULT_SCHEMA_PATH) or DEFAULT_SCHEMA_PATH,
            lookup_path=_env_str("BT_LOOKUP_PATH", DEFAULT_LOOKUP_PATH) or DEFAULT_LOOKUP_PATH,
            log_level=_env_str("BT_LOG_LEVEL", "INFO") or "INFO",
            log_json=_env_bool("BT_LOG_JSON", False),
            strict_lookup=_env_bool("BT_STRICT_LOOKUP", False),
        )
