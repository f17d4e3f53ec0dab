from __future__ import annotations

"""Settings consumed by the pipeline entry point."""


from dataclasses import dataclass

from ..exceptions import ConfigurationError
from .runtime import env_int, env_seconds, env_str

DEFAULT_FEED_ADDR = "http://localhost:8000"
DEFAULT_STORE_ADDR = "http://localhost:8001"
DEFAULT_POLL_INTERVAL_SECONDS = 5.0
DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0
DEFAULT_CHANNEL_CAPACITY = 1


@dataclass(frozen=True)
class PipelineSettings:
    feed_base_url: str = DEFAULT_FEED_ADDR
    store_base_url: str = DEFAULT_STORE_ADDR
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    channel_capacity: int = DEFAULT_CHANNEL_CAPACITY

    def __post_init__(self) -> None:
        if self.poll_interval_seconds <= 0:
            raise ConfigurationError.invalid_value(
                "poll_interval_seconds", self.poll_interval_seconds, "Polling interval must be positive"
            )
        if self.request_timeout_seconds <= 0:
            raise ConfigurationError.invalid_value(
                "request_timeout_seconds", self.request_timeout_seconds, "Request timeout must be positive"
            )
        if self.channel_capacity < 1:
            raise ConfigurationError.invalid_value("channel_capacity", self.channel_capacity, "Capacity must be at least 1")


def get_pipeline_settings() -> PipelineSettings:
    """Build settings from FEED_ADDR, STORE_ADDR and the tuning variables."""

    return PipelineSettings(
        feed_base_url=env_str("FEED_ADDR", or_value=DEFAULT_FEED_ADDR),
        store_base_url=env_str("STORE_ADDR", or_value=DEFAULT_STORE_ADDR),
        poll_interval_seconds=env_seconds("POLL_INTERVAL_SECONDS", or_value=DEFAULT_POLL_INTERVAL_SECONDS),
        request_timeout_seconds=env_seconds("REQUEST_TIMEOUT_SECONDS", or_value=DEFAULT_REQUEST_TIMEOUT_SECONDS),
        channel_capacity=env_int("CHANNEL_CAPACITY", or_value=DEFAULT_CHANNEL_CAPACITY),
    )
