"""
Runtime settings read from the environment.

Environment Variables:
    CONTRACT_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)
    CONTRACT_LOG_FORMAT: json or text (default: json)
    CONTRACT_OPS_LOG: Operation log path (default: /tmp/contract-engine/operations.log)
    CONTRACT_STORE_PATH: File store path (default: unset, in-memory store)

These only shape the host process. Contract logic never reads them.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_OPS_LOG = "/tmp/contract-engine/operations.log"

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_FORMATS = ("json", "text")


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    log_format: str = "json"
    ops_log: str = DEFAULT_OPS_LOG
    store_path: Optional[str] = None

    @staticmethod
    def from_env(env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from env (os.environ by default). Invalid values fall back to defaults."""
        env = os.environ if env is None else env

        level = env.get("CONTRACT_LOG_LEVEL", "INFO").strip().upper()
        if level not in _LEVELS:
            level = "INFO"

        fmt = env.get("CONTRACT_LOG_FORMAT", "json").strip().lower()
        if fmt not in _FORMATS:
            fmt = "json"

        return Settings(
            log_level=level,
            log_format=fmt,
            ops_log=env.get("CONTRACT_OPS_LOG") or DEFAULT_OPS_LOG,
            store_path=env.get("CONTRACT_STORE_PATH") or None,
        )
