"""
FormFlow Derivation Graph
=========================

The fixed composition that turns the three input cells into the two output
streams. Every intermediate stage is debounced by the settle interval ``D``
so that typing does not trigger a recomputation per keystroke.

```
email ──────────── debounce ─ distinct ─ len>=3 ─────────────── email_valid ──────┐
password ─┬─────── debounce ─ distinct ─ len>=6 ── password_strong ─┐             │
          ├─────── debounce ─ distinct ─ =="" ──── password_empty ──┼─ status ────┼─ is_form_valid
          └─┐                                                        │             │
repeat ─────┴─ combine ─ debounce ─ a==b ───────── passwords_equal ──┘             │
                                                                                   │
password_status ─ drop_first(1) ─ status_message ─────────────── password_error_text
```

The equality check debounces the combined (password, repeat) pair rather than
each field on its own. A burst of edits to either field therefore yields one
comparison after both settle.

Streams are cold: building the graph subscribes to nothing. Each subscription
builds its own chain back to the cells. The pipeline's FormOutputSink consumes
``password_status`` and ``email_valid`` once and derives both outputs from
them; ``is_form_valid`` and ``password_error_text`` here are the same
derivations as standalone streams.
"""

from typing import TYPE_CHECKING

from .observable import SourceCell, Stream, combine_latest
from .validation import (
    PasswordStatus,
    evaluate_password_status,
    is_email_valid,
    is_form_submittable,
    is_password_empty,
    is_password_strong,
    passwords_match,
    status_message,
)

if TYPE_CHECKING:
    from .scheduling import Scheduler


class DerivationGraph:
    """
    Intermediate and final streams derived from the three input cells.

    Attributes:
        email_valid: ``Stream[bool]``, email has at least 3 characters.
        password_strong: ``Stream[bool]``, password has at least 6 characters.
        password_empty: ``Stream[bool]``, password is the empty string.
        passwords_equal: ``Stream[bool]``, password equals the repeat field.
        password_status: ``Stream[PasswordStatus]``.
        is_form_valid: ``Stream[bool]``, status is VALID and email is valid.
        password_error_text: ``Stream[str]``, display text of every status
            except the first one computed.
    """

    def __init__(
        self,
        email: SourceCell[str],
        password: SourceCell[str],
        repeat_password: SourceCell[str],
        settle_interval: float,
        scheduler: "Scheduler",
    ) -> None:
        self.settle_interval = settle_interval
        self.scheduler = scheduler

        def settled(stream: Stream) -> Stream:
            return stream.debounce(settle_interval, scheduler)

        self.email_valid: Stream[bool] = (
            settled(email).distinct_until_changed().map(is_email_valid)
        )
        self.password_strong: Stream[bool] = (
            settled(password).distinct_until_changed().map(is_password_strong)
        )
        self.password_empty: Stream[bool] = (
            settled(password).distinct_until_changed().map(is_password_empty)
        )
        self.passwords_equal: Stream[bool] = settled(
            combine_latest(password, repeat_password)
        ).starmap(passwords_match)

        self.password_status: Stream[PasswordStatus] = combine_latest(
            self.password_empty, self.password_strong, self.passwords_equal
        ).starmap(evaluate_password_status)

        self.is_form_valid: Stream[bool] = combine_latest(
            self.password_status, self.email_valid
        ).starmap(is_form_submittable)

        # The first status reflects the untouched empty form; hide it.
        self.password_error_text: Stream[str] = self.password_status.drop_first(1).map(
            status_message
        )
