"""Construction of local timestamps from text, epochs and patterns.

Which timezone governs a construction is decided by the shape of the input
text, not by incidental parser behavior:

| shape      | example                            | instant computed in   | attached timezone     |
|------------|------------------------------------|-----------------------|-----------------------|
| `NOW`      | `now`                              | clock                 | explicit or default   |
| `RELATIVE` | `today`, `tomorrow`                | explicit or default   | explicit or default   |
| `EPOCH`    | `@1388577600`                      | UTC                   | `+00:00`              |
| `OFFSET`   | `2014-01-01 12:00:00 +0000`        | the encoded offset    | that fixed offset     |
| `REGION`   | `2014-01-01 12:00:00 Europe/Paris` | the named zone        | the named zone        |
| `PLAIN`    | `2014-01-01 12:00:00`              | explicit or default   | explicit or default   |

For the last three columns "explicit or default" means the `timezone`
argument when given, else the ambient default timezone. For `EPOCH`,
`OFFSET` and `REGION` the `timezone` argument is ignored.

Wall times that occur twice because of a DST shift resolve to the first
occurrence; wall times skipped by a DST shift are read with the offset in
effect before the shift, which moves them forward by the gap.
"""

from __future__ import annotations

import logging
import math
import re
import time
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from datetimezone import timezones
from datetimezone.errors import FormatError
from datetimezone.formats import php
from datetimezone.logging import TimezoneEvent
from datetimezone.timezones import UTC_OFFSET, Timezone
from datetimezone.values import Instant, LocalTimestamp

__all__ = [
    "TextShape",
    "classify",
    "clock",
    "create_from_format",
    "format_timestamp",
    "from_timestamp",
    "now",
    "parse",
    "with_timezone",
]

logger = logging.getLogger(__name__)


class TextShape(Enum):
    """Shapes of input text recognized by `parse`."""

    NOW = "now"
    RELATIVE = "relative"
    EPOCH = "epoch"
    OFFSET = "offset"
    REGION = "region"
    PLAIN = "plain"


_EPOCH_RE = re.compile(r"@(?P<seconds>-?\d+)")
_OFFSET_RE = re.compile(r"Z|[+-]\d{2}(?::?\d{2})?")
_DATETIME_RE = re.compile(
    r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"(?:[T ](?P<hour>\d{2}):(?P<minute>\d{2})"
    r"(?::(?P<second>\d{2})(?:\.(?P<fraction>\d{1,6}))?)?)?"
    r"(?:\s*(?P<zone>Z|[+-]\d{2}(?::?\d{2})?|[A-Za-z_]+(?:/[A-Za-z0-9_+\-]+)*))?"
)

#: relative keyword -> (days from today, hour)
_RELATIVE: dict[str, tuple[int, int]] = {
    "today": (0, 0),
    "midnight": (0, 0),
    "noon": (0, 12),
    "tomorrow": (1, 0),
    "yesterday": (-1, 0),
}


def clock() -> float:
    """Seconds since the epoch; replace in tests to freeze time."""
    return time.time()


def _current_instant() -> Instant:
    # whole seconds only, so that a dump without fractions can round-trip
    return Instant(math.floor(clock()))


def _match(text: str) -> tuple[TextShape, dict[str, Any]]:
    """Classify `text`, keeping the groups of the match that decided its shape."""
    stripped = text.strip()
    if stripped.lower() in ("", "now"):
        return TextShape.NOW, {}
    if stripped.lower() in _RELATIVE:
        return TextShape.RELATIVE, {}
    if match := _EPOCH_RE.fullmatch(stripped):
        return TextShape.EPOCH, match.groupdict()
    if (match := _DATETIME_RE.fullmatch(stripped)) is None:
        raise FormatError(text)
    if (zone := match["zone"]) is None:
        return TextShape.PLAIN, match.groupdict()
    if _OFFSET_RE.fullmatch(zone):
        return TextShape.OFFSET, match.groupdict()
    return TextShape.REGION, match.groupdict()


def classify(text: str) -> TextShape:
    """Classify `text` into the shape that decides timezone precedence.

    Raises:
        FormatError: If `text` matches none of the recognized shapes.
    """
    return _match(text)[0]


def _resolve(timezone: Timezone | str | None) -> Timezone:
    if timezone is None:
        zone = timezones.get_default_timezone()
        logger.debug(
            "No timezone given, falling back to default timezone %s",
            zone,
            extra=TimezoneEvent.DEFAULT_FALLBACK.extra(),
        )
        return zone
    if isinstance(timezone, Timezone):
        return timezone
    return timezones.get_timezone(timezone)


def _ignored(text: str, used: Timezone, explicit: Timezone | None) -> None:
    if explicit is not None:
        logger.debug(
            "Text %r carries timezone %s, ignoring %s",
            text,
            used,
            explicit,
            extra=TimezoneEvent.ARGUMENT_IGNORED.extra(),
        )


def _epoch(text: str, seconds: int, pattern: str | None = None) -> LocalTimestamp:
    try:
        instant = Instant(seconds)
    except ValueError as e:
        raise FormatError(text, pattern, str(e)) from e
    return LocalTimestamp(instant, UTC_OFFSET)


def _localize(  # pylint: disable=too-many-arguments
    text: str,
    zone: Timezone,
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
    microsecond: int = 0,
    *,
    pattern: str | None = None,
) -> LocalTimestamp:
    """Read a wall-clock time in `zone` (fold=0, see module docstring)."""
    try:
        wall = datetime(
            year, month, day, hour, minute, second, microsecond, tzinfo=zone.tzinfo
        )
        instant = Instant.from_datetime(wall)
    except ValueError as e:
        raise FormatError(text, pattern, str(e)) from e
    return LocalTimestamp(instant, zone)


def now(timezone: Timezone | str | None = None) -> LocalTimestamp:
    """Current instant (whole seconds) in `timezone` or the default timezone."""
    return LocalTimestamp(_current_instant(), _resolve(timezone))


def parse(text: str = "now", timezone: Timezone | str | None = None) -> LocalTimestamp:
    """Build a local timestamp from text.

    Args:
        text: Date/time text; see the module docstring for accepted shapes.
        timezone: Timezone for texts that carry none. Ignored when the text
            encodes an offset, a region or an epoch. When omitted, the ambient
            default timezone is used.

    Returns:
        The constructed local timestamp.

    Raises:
        FormatError: If `text` is not recognized or has out-of-range fields.
        UnknownTimezoneError: If `timezone`, or a region named in `text`, is
            not a recognized timezone.
    """
    shape, groups = _match(text)
    explicit = None if timezone is None else _resolve(timezone)

    if shape is TextShape.NOW:
        return now(explicit)

    if shape is TextShape.RELATIVE:
        zone = _resolve(explicit)
        days, hour = _RELATIVE[text.strip().lower()]
        today = _current_instant().to_datetime(zone).date() + timedelta(days=days)
        return _localize(text, zone, today.year, today.month, today.day, hour)

    if shape is TextShape.EPOCH:
        _ignored(text, UTC_OFFSET, explicit)
        return _epoch(text, int(groups["seconds"]))

    if shape is TextShape.PLAIN:
        zone = _resolve(explicit)
    else:
        zone = timezones.get_timezone(groups["zone"])
        _ignored(text, zone, explicit)
    return _localize(
        text,
        zone,
        int(groups["year"]),
        int(groups["month"]),
        int(groups["day"]),
        int(groups["hour"] or 0),
        int(groups["minute"] or 0),
        int(groups["second"] or 0),
        int((groups["fraction"] or "0").ljust(6, "0")),
    )


def from_timestamp(
    seconds: int, timezone: Timezone | str | None = None
) -> LocalTimestamp:
    """Build a local timestamp from whole epoch seconds.

    The instant never depends on `timezone`; it only selects the display
    timezone, `+00:00` when omitted.

    Raises:
        FormatError: If `seconds` is outside the supported range.
    """
    value = _epoch(f"@{seconds}", int(seconds))
    return value if timezone is None else value.with_timezone(timezone)


def create_from_format(
    pattern: str, text: str, timezone: Timezone | str | None = None
) -> LocalTimestamp:
    """Build a local timestamp by reading `text` with a date()-style pattern.

    An offset (`O`, `P`), zone (`e`), abbreviation (`T`) or epoch (`U`)
    captured by the pattern takes precedence over `timezone`. Fields missing
    from the pattern take the current time's values in the effective timezone, or the Unix
    epoch's values when the pattern contains `!` or `|`. When any time field
    is present, missing time fields are zero. Abbreviations such as `CEST`
    attach the fixed offset they denote.

    Raises:
        FormatError: If `text` does not match `pattern`, or a field is out of
            range.
        UnknownTimezoneError: If the effective timezone is not recognized.
    """
    fields = php.parse_fields(pattern, text)
    explicit = None if timezone is None else _resolve(timezone)
    if fields.epoch is not None:
        _ignored(text, UTC_OFFSET, explicit)
        return _epoch(text, fields.epoch, pattern)

    if fields.abbreviation is not None:
        zone = timezones.from_abbreviation(fields.abbreviation)
        _ignored(text, zone, explicit)
    elif fields.zone is not None:
        zone = timezones.get_timezone(fields.zone)
        _ignored(text, zone, explicit)
    else:
        zone = _resolve(explicit)

    if fields.reset:
        base = datetime(1970, 1, 1)
    else:
        base = _current_instant().to_datetime(zone).replace(tzinfo=None)
    if fields.has_time:
        base = base.replace(hour=0, minute=0, second=0)

    def pick(value: int | None, default: int) -> int:
        return default if value is None else value

    return _localize(
        text,
        zone,
        pick(fields.year, base.year),
        pick(fields.month, base.month),
        pick(fields.day, base.day),
        pick(fields.hour, base.hour),
        pick(fields.minute, base.minute),
        pick(fields.second, base.second),
        pick(fields.microsecond, 0),
        pattern=pattern,
    )


def with_timezone(value: LocalTimestamp, timezone: Timezone | str) -> LocalTimestamp:
    """Re-express `value` in `timezone`; the instant is unchanged."""
    return value.with_timezone(timezone)


def format_timestamp(value: LocalTimestamp | Instant, pattern: str) -> str:
    """Format a local timestamp, or a bare instant in the default timezone.

    A bare instant has no timezone of its own, so the output depends on the
    ambient configuration.
    """
    return value.format(pattern)
