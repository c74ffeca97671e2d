"""Logging of the timezone decisions made by datetimezone.

Library modules log through module loggers (`datetimezone.*`) at DEBUG level.
The records that matter when hunting timezone bugs carry a `timezone_event`
attribute naming what happened:

- `default-fallback`: a construction or formatter used the ambient default
  timezone because none was given.
- `argument-ignored`: an explicit timezone argument lost to an offset, a
  region or an epoch encoded in the text.
- `default-changed`: the ambient default timezone was replaced.

`watch_timezone_events()` attaches a Rich console handler that shows those
records, e.g. to find every place an application silently depends on the
process configuration.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum
from typing import Literal, TypeAlias

from rich.console import Console
from rich.logging import RichHandler

# pylint: disable=too-few-public-methods

PROJECT_PREFIX = "datetimezone"
EVENT_ATTR = "timezone_event"

ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]


class TimezoneEvent(str, Enum):
    """Timezone decisions worth surfacing."""

    DEFAULT_FALLBACK = "default-fallback"
    ARGUMENT_IGNORED = "argument-ignored"
    DEFAULT_CHANGED = "default-changed"

    def extra(self) -> dict[str, TimezoneEvent]:
        """Return the `extra` mapping that tags a log record with this event."""
        return {EVENT_ATTR: self}


class TimezoneEventFilter(logging.Filter):
    """Prefix records with their timezone event, optionally keeping only some.

    Sets `record.prefix` to a bracketed token like "[default-fallback]", or to
    an empty string for records without an event.

    Args:
        events: Events to let through. `None` lets every record through,
            tagged or not.
    """

    def __init__(self, events: Iterable[TimezoneEvent] | None = None) -> None:
        super().__init__()
        self.events = None if events is None else frozenset(events)

    def filter(self, record: logging.LogRecord) -> bool:
        """Attach the prefix and decide whether the record is kept.

        Args:
            record: The LogRecord being processed.

        Returns:
            bool: False only for records outside the selected events.
        """
        event = getattr(record, EVENT_ATTR, None)
        record.prefix = f"[{event.value}]" if event is not None else ""
        if self.events is None:
            return True
        return event in self.events


def config_console_handler(
    level: int = logging.INFO,
    debug_mode: bool = False,
    color: bool = True,
    events: Iterable[TimezoneEvent] | None = None,
) -> RichHandler:
    """Configure and return a RichHandler for console output.

    The handler writes to stderr. In debug mode the handler is set to DEBUG
    and includes source file/line information. The event filter is always
    installed, so `events` narrows the output in both modes.

    Args:
        level: Minimum level for console output (overridden to DEBUG in debug_mode).
        debug_mode: When True, enable debug formatting (show_path, timestamps).
        color: Enable color output when True.
        events: Timezone events to show; `None` shows every record.

    Returns:
        RichHandler: Configured handler suitable to attach to a logger.
    """
    color_system: ColorSystem | None = "auto" if color else None
    console = Console(color_system=color_system, stderr=True)

    if debug_mode:
        level = logging.DEBUG

    handler = RichHandler(
        level=level,
        console=console,
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )

    fmt = (
        "%(prefix)s %(message)s"
        if not debug_mode
        else "%(asctime)s %(name)s: %(prefix)s %(message)s"
    )
    handler.setFormatter(logging.Formatter(fmt=fmt))
    handler.addFilter(TimezoneEventFilter(events))
    return handler


def watch_timezone_events(
    events: Iterable[TimezoneEvent] | None = None, color: bool = True
) -> RichHandler:
    """Show timezone events on stderr.

    Lowers the `datetimezone` logger to DEBUG and attaches a console handler
    that only lets tagged records through.

    Args:
        events: Events to show; `None` shows all of them.
        color: Enable color output when True.

    Returns:
        RichHandler: The attached handler; remove it from the `datetimezone`
        logger to stop watching.
    """
    handler = config_console_handler(
        logging.DEBUG, color=color, events=list(TimezoneEvent) if events is None else events
    )
    logger = logging.getLogger(PROJECT_PREFIX)
    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    return handler
