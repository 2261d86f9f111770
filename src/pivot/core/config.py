"""Configuration loading for Pivot.

Configuration is a YAML document validated against ``PivotConfig``.
It is loaded once at startup and treated as read-only afterwards.

Example::

    ingest:
      max_events: 500000
      read_timeout_seconds: ${PIVOT_READ_TIMEOUT:-60}
    rules:
      brute_force_threshold: 5
      disabled: []
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from pivot.core.errors import ConfigError

CONFIG_ENV_VAR = "PIVOT_CONFIG"


class IngestConfig(BaseModel):
    """Limits applied while normalizing an input file."""

    max_events: int | None = Field(
        default=1_000_000,
        ge=1,
        description="Maximum events per file (None disables the guard)",
    )

    read_timeout_seconds: float | None = Field(
        default=300.0,
        gt=0,
        description="Wall-clock budget for draining one file (None disables)",
    )

    chunk_size: int = Field(
        default=64 * 1024,
        ge=16,
        description="Read size in characters for incremental JSON decoding",
    )

    model_config = {"extra": "forbid"}


class RulesConfig(BaseModel):
    """Selection and tuning of the built-in detection rules."""

    disabled: list[str] = Field(
        default_factory=list,
        description="Rule ids to leave out of the rule set",
    )

    brute_force_threshold: int = Field(
        default=3,
        ge=0,
        description="Failed logins per ip that must be exceeded to fire R-001",
    )

    model_config = {"extra": "forbid"}


class PivotConfig(BaseModel):
    """Top-level Pivot configuration."""

    ingest: IngestConfig = Field(default_factory=IngestConfig)
    rules: RulesConfig = Field(default_factory=RulesConfig)

    model_config = {"extra": "forbid", "frozen": True}


def _substitute_env(content: str) -> str:
    """Substitute ${VAR} and ${VAR:-default} from the environment."""

    def replace_var(match: re.Match[str]) -> str:
        var_expr = match.group(1)
        if ":-" in var_expr:
            var_name, default = var_expr.split(":-", 1)
            return os.environ.get(var_name, default)
        return os.environ.get(var_expr, match.group(0))

    return re.sub(r"\$\{([^}]+)\}", replace_var, content)


def load_config(path: Path | str | None = None) -> PivotConfig:
    """Load configuration from a YAML file.

    Falls back to ``$PIVOT_CONFIG`` when no path is given, and to
    defaults when neither is set.

    Args:
        path: Path to YAML config file

    Returns:
        Validated PivotConfig

    Raises:
        ConfigError: If the file is missing, not YAML, or fails validation
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or None
    if path is None:
        return PivotConfig()

    config_path = Path(path)
    if not config_path.is_file():
        raise ConfigError(f"Config file not found: {config_path}", path=str(config_path))

    with open(config_path, encoding="utf-8") as f:
        content = _substitute_env(f.read())

    try:
        data: Any = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML parse error: {e}", path=str(config_path)) from e

    if data is None:
        return PivotConfig()
    if not isinstance(data, dict):
        raise ConfigError("Config must be a YAML mapping", path=str(config_path))

    try:
        return PivotConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config: {e}", path=str(config_path)) from e
