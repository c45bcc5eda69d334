from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any

import yaml

from sarif_filter.engine import DEFAULT_INVALID_DATE_POLICY, INVALID_DATE_POLICIES
from sarif_filter.loader import DEFAULT_TIMEOUT_SECONDS


@dataclass
class FilterConfig:
    http_timeout_seconds: float
    invalid_date_policy: str
    indent: int
    log_level: str


DEFAULT_CONFIG_PATH = Path("sarif-filter.yaml")

TIMEOUT_ENV = "SARIF_FILTER_HTTP_TIMEOUT"
INVALID_DATE_ENV = "SARIF_FILTER_INVALID_DATE"
LOG_LEVEL_ENV = "SARIF_FILTER_LOG_LEVEL"

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def load_config(path: str | Path | None = None, overrides: dict[str, Any] | None = None) -> FilterConfig:
    """Build the runtime config from a YAML file, the environment and explicit overrides.

    Later sources win. A missing default file means defaults; a missing file that
    was asked for by name is an error. ``None`` values in ``overrides`` are ignored.
    """
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    raw: Any = {}
    if path or config_path.exists():
        raw = yaml.safe_load(config_path.read_text()) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")

    values = {
        "http_timeout_seconds": os.getenv(TIMEOUT_ENV, raw.get("http_timeout_seconds", DEFAULT_TIMEOUT_SECONDS)),
        "invalid_date_policy": os.getenv(INVALID_DATE_ENV, raw.get("invalid_date_policy", DEFAULT_INVALID_DATE_POLICY)),
        "indent": raw.get("indent", 2),
        "log_level": os.getenv(LOG_LEVEL_ENV, raw.get("log_level", "WARNING")),
    }
    for key, value in (overrides or {}).items():
        if key not in values:
            raise ValueError(f"Unknown config key: {key}")
        if value is not None:
            values[key] = value

    http_timeout_seconds = float(values["http_timeout_seconds"])
    invalid_date_policy = str(values["invalid_date_policy"]).lower()
    indent = int(values["indent"])
    log_level = str(values["log_level"]).upper()
    if http_timeout_seconds <= 0:
        raise ValueError("http_timeout_seconds must be > 0")
    if indent < 0:
        raise ValueError("indent must be >= 0")
    if invalid_date_policy not in INVALID_DATE_POLICIES:
        raise ValueError(f"invalid_date_policy must be one of {', '.join(INVALID_DATE_POLICIES)}")
    if log_level not in LOG_LEVELS:
        raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")

    return FilterConfig(
        http_timeout_seconds=http_timeout_seconds,
        invalid_date_policy=invalid_date_policy,
        indent=indent,
        log_level=log_level,
    )
