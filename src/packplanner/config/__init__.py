"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .planner import PlannerConfig, get_planner_config
from .sources import SourceConfig, get_source_config

__all__ = [
    "ConfigurationError",
    "MissingConfigurationError",
    "PlannerConfig",
    "SourceConfig",
    "get_planner_config",
    "get_source_config",
    "optional_env_var",
    "require_env_vars",
]
