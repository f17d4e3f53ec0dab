"""Exception classes for the event pipeline.

Every failure the pipeline raises derives from ``PipelineError`` so stage loops
can recover from any of them per item.

Exception classes support two patterns:
1. No-argument raise: raise SourceFetchError()
2. Contextual attributes: err = OddsDecodeError(odds="x/5", market_id=101); raise err
"""

from __future__ import annotations

from typing import Any, Optional


class PipelineError(Exception):
    """Base exception for all pipeline errors.

    Supports keyword arguments that are stored as attributes for debugging.
    """

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = self.__class__.__doc__ or "Pipeline error occurred"
        super().__init__(message)
        for key, value in kwargs.items():
            setattr(self, key, value)


class ConfigurationError(PipelineError):
    """Configuration is invalid or missing."""

    @classmethod
    def invalid_value(cls, param_name: str, value: Any, reason: str = "") -> "ConfigurationError":
        """Create error for invalid value."""
        msg = f"Invalid value for {param_name}: {value!r}"
        if reason:
            msg += f". {reason}"
        return cls(msg, param_name=param_name, value=value)

    @classmethod
    def missing_value(cls, param_name: str, context: str = "") -> "ConfigurationError":
        """Create error for missing value."""
        msg = f"{param_name} is missing or empty"
        if context:
            msg += f": {context}"
        return cls(msg, param_name=param_name)


class SourceFetchError(PipelineError):
    """Fetching a resource from the source service failed."""

    def __init__(self, message: str = "", *, url: str = "", status: Optional[int] = None, **kwargs: Any) -> None:
        super().__init__(message, url=url, status=status, **kwargs)


class DecodeError(PipelineError):
    """A payload could not be decoded into a pipeline entity."""


class PayloadDecodeError(DecodeError):
    """A JSON payload is missing fields or carries values of the wrong type."""


class OddsDecodeError(DecodeError):
    """An odds string is not a numerator/denominator pair."""

    def __init__(self, odds: str, *, market_id: Any = None) -> None:
        message = f"Failed to parse odds {odds!r}"
        if market_id is not None:
            message += f" for market {market_id}"
        super().__init__(message, odds=odds, market_id=market_id)


class StoreWriteError(PipelineError):
    """The event store did not accept an event."""

    def __init__(self, message: str = "", *, event_id: str = "", status: Optional[int] = None, **kwargs: Any) -> None:
        super().__init__(message, event_id=event_id, status=status, **kwargs)


class ChannelClosedError(PipelineError):
    """The channel is closed, or the wait on it was cancelled."""


__all__ = [
    "ChannelClosedError",
    "ConfigurationError",
    "DecodeError",
    "OddsDecodeError",
    "PayloadDecodeError",
    "PipelineError",
    "SourceFetchError",
    "StoreWriteError",
]
