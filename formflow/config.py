"""FormFlow configuration.

PipelineConfig is frozen after creation. The settle interval is the only
recognized option and governs every debounce stage in the derivation graph.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigError

DEFAULT_SETTLE_INTERVAL = 0.8

SETTLE_INTERVAL_ENV = "FORMFLOW_SETTLE_INTERVAL"


@dataclass(frozen=True)
class PipelineConfig:
    """Configuration for a FormValidationPipeline.

    Attributes:
        settle_interval: Quiet period, in scheduler time units (seconds for the
            asyncio scheduler), that an input must stay unchanged before the
            derivation graph recomputes from it.
    """

    settle_interval: float = DEFAULT_SETTLE_INTERVAL

    def __post_init__(self) -> None:
        value = self.settle_interval
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(
                f"settle_interval must be a number, got {type(value).__name__}"
            )
        if value != value or value < 0:
            raise ConfigError(f"settle_interval must be >= 0, got {value!r}")
        object.__setattr__(self, "settle_interval", float(value))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PipelineConfig":
        """Build a config from ``FORMFLOW_SETTLE_INTERVAL``, falling back to defaults."""
        environ = os.environ if environ is None else environ
        raw = environ.get(SETTLE_INTERVAL_ENV)
        if raw is None or not raw.strip():
            return cls()
        try:
            interval = float(raw)
        except ValueError:
            raise ConfigError(
                f"{SETTLE_INTERVAL_ENV}={raw!r} is not a valid number"
            ) from None
        return cls(settle_interval=interval)
