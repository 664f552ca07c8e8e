"""
FormFlow - Reactive Form Validation
===================================

A small reactive dataflow engine that derives a "form is submittable" flag
and a password error message from three raw text inputs (email, password,
repeated password), using debounced, deduplicated and combined streams.
"""

from .config import DEFAULT_SETTLE_INTERVAL, PipelineConfig
from .errors import ConfigError, FormflowError, InactivePipelineError
from .form import FormValidationPipeline
from .graph import DerivationGraph
from .observable import (
    OutputRegister,
    SourceCell,
    Stream,
    combine_latest,
)
from .scheduling import (
    AsyncioScheduler,
    ScheduledAction,
    Scheduler,
    VirtualTimeScheduler,
)
from .subscription import Subscription, SubscriptionRegistry
from .validation import STATUS_MESSAGES, PasswordStatus, status_message

__version__ = "0.1.0"

__all__ = [
    # Pipeline
    "FormValidationPipeline",
    "DerivationGraph",
    "PipelineConfig",
    "DEFAULT_SETTLE_INTERVAL",
    # Streams
    "Stream",
    "SourceCell",
    "OutputRegister",
    "combine_latest",
    # Scheduling
    "Scheduler",
    "ScheduledAction",
    "VirtualTimeScheduler",
    "AsyncioScheduler",
    # Subscriptions
    "Subscription",
    "SubscriptionRegistry",
    # Password policy
    "PasswordStatus",
    "STATUS_MESSAGES",
    "status_message",
    # Errors
    "FormflowError",
    "InactivePipelineError",
    "ConfigError",
]
