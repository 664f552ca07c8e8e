#!/usr/bin/env python3
"""
FormFlow Demo - Replay a Typing Session on a Virtual Clock

Types the three fields one keystroke at a time, lets the pipeline settle, and
prints every change of the two outputs in a rich table.

    formflow-demo --email abc --password abcdef --repeat-password abcdef
    formflow-demo --password abc --repeat-password xyz --verbose
"""

import argparse
import logging
from typing import List, Optional, Sequence, Tuple

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .config import PipelineConfig
from .errors import ConfigError
from .form import FormValidationPipeline
from .scheduling import VirtualTimeScheduler

Event = Tuple[float, str, object]


def type_text(
    pipeline_setter, text: str, scheduler: VirtualTimeScheduler, keystroke_gap: float
) -> None:
    """Write every prefix of ``text``, ``keystroke_gap`` apart."""
    for end in range(1, len(text) + 1):
        pipeline_setter(text[:end])
        scheduler.advance_by(keystroke_gap)


def run_session(
    email: str,
    password: str,
    repeat_password: str,
    settle_interval: float,
    keystroke_gap: float,
) -> Tuple[List[Event], FormValidationPipeline]:
    """Drive a pipeline through one typing session and collect output events."""
    scheduler = VirtualTimeScheduler()
    pipeline = FormValidationPipeline(
        PipelineConfig(settle_interval=settle_interval), scheduler=scheduler
    )
    events: List[Event] = []

    pipeline.on_form_validity_changed(
        lambda value: events.append((scheduler.now(), "is_form_valid", value))
    )
    pipeline.on_password_error_text_changed(
        lambda value: events.append((scheduler.now(), "password_error_text", value))
    )

    pipeline.start()
    scheduler.advance_by(settle_interval)
    type_text(pipeline.set_email, email, scheduler, keystroke_gap)
    type_text(pipeline.set_password, password, scheduler, keystroke_gap)
    type_text(pipeline.set_repeat_password, repeat_password, scheduler, keystroke_gap)
    scheduler.run_all()
    pipeline.stop()
    return events, pipeline


def render_events(console: Console, events: Sequence[Event], pipeline: FormValidationPipeline) -> None:
    table = Table(title="Output changes", show_lines=False)
    table.add_column("t", justify="right", style="cyan")
    table.add_column("Output", style="magenta")
    table.add_column("Value")

    for when, name, value in events:
        table.add_row(f"{when:.2f}", name, repr(value))

    console.print(table)

    style = "green" if pipeline.is_form_valid else "red"
    footer = pipeline.password_error_text or "(no error)"
    console.print(
        Panel(
            f"Submit enabled: [bold]{pipeline.is_form_valid}[/bold]\nFooter: {footer}",
            title="Final state",
            border_style=style,
        )
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="formflow-demo",
        description="Replay a form typing session through the validation pipeline",
    )
    parser.add_argument("--email", default="abc")
    parser.add_argument("--password", default="abcdef")
    parser.add_argument("--repeat-password", default="abcdef")
    parser.add_argument(
        "--settle-interval",
        type=float,
        default=None,
        help="Debounce interval (defaults to $FORMFLOW_SETTLE_INTERVAL or 0.8)",
    )
    parser.add_argument(
        "--keystroke-gap",
        type=float,
        default=0.1,
        help="Virtual time between keystrokes",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log pipeline activity")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    console = Console()

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )

    try:
        if args.settle_interval is None:
            config = PipelineConfig.from_env()
        else:
            config = PipelineConfig(settle_interval=args.settle_interval)
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        return 2

    events, pipeline = run_session(
        args.email,
        args.password,
        args.repeat_password,
        settle_interval=config.settle_interval,
        keystroke_gap=args.keystroke_gap,
    )
    render_events(console, events, pipeline)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
