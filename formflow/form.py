"""
FormFlow Pipeline - Inputs, Outputs and Lifecycle
=================================================

FormValidationPipeline is the boundary the UI talks to:

- three setters feed the input cells on every raw edit,
- two listener hooks report changes of the derived outputs,
- ``start``/``stop`` wire and tear down the derivation graph.

```python
import asyncio
from formflow import FormValidationPipeline

async def main():
    pipeline = FormValidationPipeline()
    pipeline.on_form_validity_changed(lambda ok: print("submit enabled:", ok))
    pipeline.on_password_error_text_changed(lambda text: print("footer:", text))

    with pipeline:                      # start() ... stop()
        pipeline.set_email("abc")
        pipeline.set_password("abcdef")
        pipeline.set_repeat_password("abcdef")
        await asyncio.sleep(1.0)        # submit enabled: True

asyncio.run(main())
```

Without an explicit scheduler the pipeline uses an AsyncioScheduler, so
``start`` and the setters must then be called while an event loop is running.

Setters called before ``start`` are kept in the cells and picked up when the
graph subscribes. After ``stop`` both setters and new listeners raise
InactivePipelineError; ``stop`` itself may be called any number of times.
"""

import logging
from typing import Callable, List, Optional, Tuple

from .config import PipelineConfig
from .errors import InactivePipelineError
from .graph import DerivationGraph
from .observable import OutputRegister, SourceCell
from .scheduling import AsyncioScheduler, Scheduler
from .subscription import Subscription, SubscriptionRegistry
from .validation import PasswordStatus, is_form_submittable, status_message

logger = logging.getLogger(__name__)

_IDLE = "idle"
_RUNNING = "running"
_STOPPED = "stopped"

_UNSET = object()


class FormOutputSink:
    """
    Writes the validity flag and the error text from one status subscription.

    Both registers are derived from the same latest ``(status, email_valid)``
    pair. On each emission the sink stages the error text, then the validity
    flag, and only then notifies listeners, so ``is_form_valid`` is never seen
    True next to a stale error message.

    The very first status reflects the untouched form and does not reach the
    error text; validity is written from its first computation onwards.
    """

    def __init__(
        self,
        form_valid: OutputRegister[bool],
        error_text: OutputRegister[str],
        statuses_to_hide: int = 1,
    ) -> None:
        self._form_valid = form_valid
        self._error_text = error_text
        self._statuses_to_hide = statuses_to_hide
        self._status = _UNSET
        self._email_valid = _UNSET

    def attach(self, graph: DerivationGraph) -> List[Subscription]:
        return [
            graph.password_status.subscribe(self.on_password_status),
            graph.email_valid.subscribe(self.on_email_valid),
        ]

    def on_password_status(self, status: PasswordStatus) -> None:
        self._status = status
        staged: List[Tuple[OutputRegister, object]] = []
        if self._statuses_to_hide > 0:
            self._statuses_to_hide -= 1
        else:
            staged.append((self._error_text, status_message(status)))
        if self._email_valid is not _UNSET:
            staged.append((self._form_valid, is_form_submittable(status, self._email_valid)))
        self._commit(staged)

    def on_email_valid(self, email_valid: bool) -> None:
        self._email_valid = email_valid
        if self._status is not _UNSET:
            self._commit([(self._form_valid, is_form_submittable(self._status, email_valid))])

    def _commit(self, staged: List[Tuple[OutputRegister, object]]) -> None:
        for register, value in staged:
            logger.debug("%s -> %r", register.key, value)
            register.stage(value)
        for register, _ in staged:
            register.publish()


class FormValidationPipeline:
    """Derives form validity and password error text from three text inputs."""

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self.config = config or PipelineConfig()
        self.scheduler = scheduler or AsyncioScheduler()

        self._email: SourceCell[str] = SourceCell("email", "")
        self._password: SourceCell[str] = SourceCell("password", "")
        self._repeat_password: SourceCell[str] = SourceCell("repeat_password", "")

        self._form_valid: OutputRegister[bool] = OutputRegister("is_form_valid", False)
        self._error_text: OutputRegister[str] = OutputRegister("password_error_text", "")

        self.graph = DerivationGraph(
            self._email,
            self._password,
            self._repeat_password,
            settle_interval=self.config.settle_interval,
            scheduler=self.scheduler,
        )
        self._sink = FormOutputSink(self._form_valid, self._error_text)
        self._registry = SubscriptionRegistry("form-validation")
        self._state = _IDLE

    # Lifecycle

    @property
    def is_running(self) -> bool:
        return self._state == _RUNNING

    @property
    def is_stopped(self) -> bool:
        return self._state == _STOPPED

    def start(self) -> "FormValidationPipeline":
        """Subscribe the output sink to the derivation graph. Idempotent."""
        if self._state == _RUNNING:
            return self
        self._ensure_active("start")
        self._state = _RUNNING
        for subscription in self._sink.attach(self.graph):
            self._registry.add(subscription)
        logger.info(
            "Form validation pipeline started (settle_interval=%s)",
            self.config.settle_interval,
        )
        return self

    def stop(self) -> None:
        """Tear down every subscription and pending timer. Idempotent."""
        if self._state == _STOPPED:
            return
        self._state = _STOPPED
        self._registry.dispose()
        logger.info("Form validation pipeline stopped")

    def __enter__(self) -> "FormValidationPipeline":
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False

    # Inputs

    def set_email(self, value: str) -> None:
        self._ensure_active("set email")
        self._email.set(value)

    def set_password(self, value: str) -> None:
        self._ensure_active("set password")
        self._password.set(value)

    def set_repeat_password(self, value: str) -> None:
        self._ensure_active("set repeat password")
        self._repeat_password.set(value)

    # Outputs

    @property
    def is_form_valid(self) -> bool:
        return self._form_valid.value

    @property
    def password_error_text(self) -> str:
        return self._error_text.value

    def on_form_validity_changed(self, callback: Callable[[bool], None]) -> Subscription:
        """Call ``callback`` with every new validity value."""
        self._ensure_active("subscribe to form validity")
        return self._registry.add(self._form_valid.subscribe(callback))

    def on_password_error_text_changed(self, callback: Callable[[str], None]) -> Subscription:
        """Call ``callback`` with every new password error text."""
        self._ensure_active("subscribe to password error text")
        return self._registry.add(self._error_text.subscribe(callback))

    def _ensure_active(self, operation: str) -> None:
        if self._state == _STOPPED:
            raise InactivePipelineError(operation)

    def __repr__(self) -> str:
        return (
            f"FormValidationPipeline(state={self._state!r}, "
            f"is_form_valid={self.is_form_valid!r}, "
            f"password_error_text={self.password_error_text!r})"
        )
