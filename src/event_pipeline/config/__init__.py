"""Shared configuration helpers and dataclasses."""

from ..exceptions import ConfigurationError
from .runtime import env_float, env_int, env_seconds, env_str
from .settings import PipelineSettings, get_pipeline_settings

__all__ = [
    "ConfigurationError",
    "PipelineSettings",
    "env_float",
    "env_int",
    "env_seconds",
    "env_str",
    "get_pipeline_settings",
]
