"""ICU-style display formatter.

The pattern syntax differs from `php` (runs of letters such as `yyyy`, `MM`,
`HH`; quoted literals), see
http://userguide.icu-project.org/formatparse/datetime. Names are rendered in
English regardless of the process locale.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from datetimezone import timezones
from datetimezone.errors import FormatError
from datetimezone.formats.php import DAY_NAMES, MONTH_NAMES
from datetimezone.logging import TimezoneEvent
from datetimezone.timezones import Timezone
from datetimezone.values import Instant, LocalTimestamp

__all__ = ["PatternFormatter", "tokenize"]

logger = logging.getLogger(__name__)

#: A token is either (letter, run length) or ("", literal text).
Token = tuple[str, int | str]


def tokenize(pattern: str) -> list[Token]:
    """Split an ICU pattern into letter runs and literal text.

    Raises:
        FormatError: On an unterminated quote or an unsupported letter.
    """
    tokens: list[Token] = []
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "'":
            if pattern.startswith("''", i):
                tokens.append(("", "'"))
                i += 2
                continue
            end = i + 1
            literal: list[str] = []
            while True:
                if end >= len(pattern):
                    raise FormatError(pattern, pattern, "unterminated quoted literal")
                if pattern.startswith("''", end):
                    literal.append("'")
                    end += 2
                elif pattern[end] == "'":
                    break
                else:
                    literal.append(pattern[end])
                    end += 1
            tokens.append(("", "".join(literal)))
            i = end + 1
        elif char.isascii() and char.isalpha():
            run = i
            while run < len(pattern) and pattern[run] == char:
                run += 1
            if char not in _FIELDS:
                raise FormatError(pattern, pattern, f"unsupported pattern letter '{char}'")
            tokens.append((char, run - i))
            i = run
        else:
            tokens.append(("", char))
            i += 1
    return tokens


def _pad(value: int, width: int) -> str:
    return f"{value:0{width}d}"


def _offset(dt: datetime, colon: bool, hours_only: bool = False) -> str:
    total = int((dt.utcoffset() or timedelta(0)).total_seconds())
    sign = "-" if total < 0 else "+"
    minutes = abs(total) // 60
    if hours_only and minutes % 60 == 0:
        return f"{sign}{minutes // 60:02d}"
    sep = ":" if colon else ""
    return f"{sign}{minutes // 60:02d}{sep}{minutes % 60:02d}"


def _zone_z(dt: datetime, count: int) -> str:
    if count <= 3:
        return _offset(dt, colon=False)
    if count == 4:
        return "GMT" + _offset(dt, colon=True)
    return "Z" if not dt.utcoffset() else _offset(dt, colon=True)


def _zone_x(dt: datetime, count: int, zulu: bool) -> str:
    if zulu and not dt.utcoffset():
        return "Z"
    if count == 1:
        return _offset(dt, colon=False, hours_only=True)
    return _offset(dt, colon=count % 2 == 1)


def _year(dt: datetime, count: int) -> str:
    return _pad(dt.year % 100, 2) if count == 2 else _pad(dt.year, count)


def _month(dt: datetime, count: int) -> str:
    if count >= 4:
        return MONTH_NAMES[dt.month - 1]
    if count == 3:
        return MONTH_NAMES[dt.month - 1][:3]
    return _pad(dt.month, count)


def _weekday(dt: datetime, count: int) -> str:
    name = DAY_NAMES[dt.weekday()]
    return name if count >= 4 else name[:3]


def _fraction(dt: datetime, count: int) -> str:
    return f"{dt.microsecond:06d}".ljust(count, "0")[:count]


_Field = Callable[[datetime, int, str], str]

_FIELDS: dict[str, _Field] = {
    "G": lambda dt, n, _: "AD" if n < 4 else "Anno Domini",
    "y": lambda dt, n, _: _year(dt, n),
    "M": lambda dt, n, _: _month(dt, n),
    "L": lambda dt, n, _: _month(dt, n),
    "d": lambda dt, n, _: _pad(dt.day, n),
    "D": lambda dt, n, _: _pad(dt.timetuple().tm_yday, n),
    "E": lambda dt, n, _: _weekday(dt, n),
    "a": lambda dt, n, _: "AM" if dt.hour < 12 else "PM",
    "h": lambda dt, n, _: _pad(dt.hour % 12 or 12, n),
    "H": lambda dt, n, _: _pad(dt.hour, n),
    "k": lambda dt, n, _: _pad(dt.hour or 24, n),
    "K": lambda dt, n, _: _pad(dt.hour % 12, n),
    "m": lambda dt, n, _: _pad(dt.minute, n),
    "s": lambda dt, n, _: _pad(dt.second, n),
    "S": lambda dt, n, _: _fraction(dt, n),
    # long zone names are locale data; the identifier stands in for them
    "z": lambda dt, n, name: name if n >= 4 else (dt.tzname() or name),
    "Z": lambda dt, n, _: _zone_z(dt, n),
    "X": lambda dt, n, _: _zone_x(dt, n, zulu=True),
    "x": lambda dt, n, _: _zone_x(dt, n, zulu=False),
}


class PatternFormatter:
    """Formats instants for display in one fixed timezone.

    The formatter never uses the timezone attached to the value it formats:
    it always re-expresses the instant in its own timezone first.

    Example:
        ```py
        formatter = PatternFormatter("Europe/Paris", "yyyy-MM-dd HH:mm:ss")
        formatter.format(parse("2014-08-01 12:00:00 +0000"))  # "2014-08-01 14:00:00"
        ```
    """

    def __init__(self, timezone: Timezone | str | None, pattern: str) -> None:
        """Create a formatter.

        Args:
            timezone: Display timezone. `None` takes the ambient default
                timezone once, at construction time.
            pattern: ICU-style pattern, e.g. `yyyy-MM-dd HH:mm:ss`.

        Raises:
            UnknownTimezoneError: If `timezone` is not recognized.
            FormatError: If `pattern` is invalid.
        """
        if timezone is None:
            self.timezone = timezones.get_default_timezone()
            logger.debug(
                "PatternFormatter using default timezone %s",
                self.timezone,
                extra=TimezoneEvent.DEFAULT_FALLBACK.extra(),
            )
        elif isinstance(timezone, Timezone):
            self.timezone = timezone
        else:
            self.timezone = timezones.get_timezone(timezone)
        self.set_pattern(pattern)

    @property
    def pattern(self) -> str:
        """The current ICU pattern."""
        return self._pattern

    def set_pattern(self, pattern: str) -> None:
        """Replace the pattern.

        Raises:
            FormatError: If `pattern` is invalid.
        """
        self._tokens = tokenize(pattern)
        self._pattern = pattern

    def format(self, value: LocalTimestamp | Instant | datetime | int) -> str:
        """Render `value` in the formatter's timezone.

        Args:
            value: A local timestamp, an instant, an aware datetime, or epoch
                seconds.
        """
        if isinstance(value, LocalTimestamp):
            instant = value.instant
        elif isinstance(value, Instant):
            instant = value
        elif isinstance(value, datetime):
            instant = Instant.from_datetime(value)
        else:
            instant = Instant(int(value))
        dt = instant.to_datetime(self.timezone)
        return "".join(
            _FIELDS[letter](dt, count, self.timezone.name) if letter else str(count)
            for letter, count in self._tokens
        )

    def __repr__(self) -> str:
        return f"PatternFormatter({self.timezone.name!r}, {self._pattern!r})"
