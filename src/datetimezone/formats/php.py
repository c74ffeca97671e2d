"""date()-style patterns: rendering and field extraction.

Every pattern character listed in `_FORMATTERS` is replaced by a datetime
component; a backslash escapes the next character; anything else is copied
as-is. Names are English and independent of the process locale.
"""

from __future__ import annotations

import calendar
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from datetimezone.errors import FormatError

__all__ = [
    "ATOM",
    "COOKIE",
    "ISO8601",
    "RFC2822",
    "RFC3339",
    "SIMPLE_FORMAT",
    "ParsedFields",
    "format_datetime",
    "parse_fields",
]

SIMPLE_FORMAT = "Y-m-d H:i:s"
ISO8601 = "Y-m-d\\TH:i:sO"
ATOM = "Y-m-d\\TH:i:sP"
RFC3339 = ATOM
RFC2822 = "D, d M Y H:i:s O"
COOKIE = "l, d-M-Y H:i:s T"

DAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


# ============================================================================
#                               Rendering
# ============================================================================


def _offset(dt: datetime, colon: bool, zulu: bool = False) -> str:
    offset = dt.utcoffset() or timedelta(0)
    total = int(offset.total_seconds())
    if zulu and total == 0:
        return "Z"
    sign = "-" if total < 0 else "+"
    minutes = abs(total) // 60
    sep = ":" if colon else ""
    return f"{sign}{minutes // 60:02d}{sep}{minutes % 60:02d}"


def _ordinal_suffix(day: int) -> str:
    if 11 <= day % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


def _hour12(dt: datetime) -> int:
    return dt.hour % 12 or 12


_Formatter = Callable[[datetime, str], str]

_FORMATTERS: dict[str, _Formatter] = {
    # day
    "d": lambda dt, _: f"{dt.day:02d}",
    "D": lambda dt, _: DAY_NAMES[dt.weekday()][:3],
    "j": lambda dt, _: str(dt.day),
    "l": lambda dt, _: DAY_NAMES[dt.weekday()],
    "N": lambda dt, _: str(dt.isoweekday()),
    "S": lambda dt, _: _ordinal_suffix(dt.day),
    "w": lambda dt, _: str(dt.isoweekday() % 7),
    "z": lambda dt, _: str(dt.timetuple().tm_yday - 1),
    # week
    "W": lambda dt, _: f"{dt.isocalendar()[1]:02d}",
    # month
    "F": lambda dt, _: MONTH_NAMES[dt.month - 1],
    "m": lambda dt, _: f"{dt.month:02d}",
    "M": lambda dt, _: MONTH_NAMES[dt.month - 1][:3],
    "n": lambda dt, _: str(dt.month),
    "t": lambda dt, _: str(calendar.monthrange(dt.year, dt.month)[1]),
    # year
    "L": lambda dt, _: "1" if calendar.isleap(dt.year) else "0",
    "o": lambda dt, _: f"{dt.isocalendar()[0]:04d}",
    "Y": lambda dt, _: f"{dt.year:04d}",
    "y": lambda dt, _: f"{dt.year % 100:02d}",
    # time
    "a": lambda dt, _: "am" if dt.hour < 12 else "pm",
    "A": lambda dt, _: "AM" if dt.hour < 12 else "PM",
    "g": lambda dt, _: str(_hour12(dt)),
    "G": lambda dt, _: str(dt.hour),
    "h": lambda dt, _: f"{_hour12(dt):02d}",
    "H": lambda dt, _: f"{dt.hour:02d}",
    "i": lambda dt, _: f"{dt.minute:02d}",
    "s": lambda dt, _: f"{dt.second:02d}",
    "u": lambda dt, _: f"{dt.microsecond:06d}",
    "v": lambda dt, _: f"{dt.microsecond // 1000:03d}",
    # timezone
    "e": lambda _, name: name,
    "I": lambda dt, _: "1" if dt.dst() else "0",
    "O": lambda dt, _: _offset(dt, colon=False),
    "P": lambda dt, _: _offset(dt, colon=True),
    "p": lambda dt, _: _offset(dt, colon=True, zulu=True),
    "T": lambda dt, name: dt.tzname() or name,
    "Z": lambda dt, _: str(int((dt.utcoffset() or timedelta(0)).total_seconds())),
    # full date/time
    "c": lambda dt, name: format_datetime(dt, ATOM, name),
    "r": lambda dt, name: format_datetime(dt, RFC2822, name),
    "U": lambda dt, _: str((dt - _EPOCH) // timedelta(seconds=1)),
}


def format_datetime(dt: datetime, pattern: str, tz_name: str) -> str:
    """Render an aware datetime with a date()-style pattern.

    Args:
        dt: Aware datetime, already expressed in the display timezone.
        pattern: Pattern such as `Y-m-d H:i:s`.
        tz_name: Name of the display timezone, used by `e` (and `T` when the
            tzinfo has no abbreviation).

    Returns:
        The formatted string.
    """
    out: list[str] = []
    chars = iter(pattern)
    for char in chars:
        if char == "\\":
            out.append(next(chars, ""))
        elif formatter := _FORMATTERS.get(char):
            out.append(formatter(dt, tz_name))
        else:
            out.append(char)
    return "".join(out)


# ============================================================================
#                               Parsing
# ============================================================================

_ZONE_RE = r"Z|[+-]\d{2}(?::?\d{2})?|[A-Za-z_]+(?:/[A-Za-z0-9_+\-]+)*"

#: pattern character -> (field kind, regex)
_PARSERS: dict[str, tuple[str, str]] = {
    "d": ("day", r"\d{1,2}"),
    "j": ("day", r"\d{1,2}"),
    "D": ("weekday", r"[A-Za-z]{3}"),
    "l": ("weekday", r"[A-Za-z]+"),
    "m": ("month", r"\d{1,2}"),
    "n": ("month", r"\d{1,2}"),
    "M": ("month_name", r"[A-Za-z]{3}"),
    "F": ("month_name", r"[A-Za-z]+"),
    "Y": ("year", r"\d{4}"),
    "y": ("year2", r"\d{2}"),
    "H": ("hour", r"\d{1,2}"),
    "G": ("hour", r"\d{1,2}"),
    "h": ("hour12", r"\d{1,2}"),
    "g": ("hour12", r"\d{1,2}"),
    "i": ("minute", r"\d{2}"),
    "s": ("second", r"\d{2}"),
    "u": ("microsecond", r"\d{1,6}"),
    "v": ("millisecond", r"\d{1,3}"),
    "A": ("meridiem", r"[AaPp][Mm]"),
    "a": ("meridiem", r"[AaPp][Mm]"),
    "O": ("zone", r"Z|[+-]\d{2}:?\d{2}"),
    "P": ("zone", r"Z|[+-]\d{2}:?\d{2}"),
    "e": ("zone", _ZONE_RE),
    "T": ("abbreviation", _ZONE_RE),
    "U": ("epoch", r"-?\d+"),
}

_RESET_ALL = "!"
_RESET_UNPARSED = "|"


@dataclass
class ParsedFields:  # pylint: disable=too-many-instance-attributes
    """Raw fields extracted from text by `parse_fields`.

    Fields left as `None` were not present in the pattern. `reset` is True
    when the pattern asked for unparsed fields to take Unix epoch values
    instead of the current time. `abbreviation` holds text read by `T`,
    which names an offset rather than a region.
    """

    year: int | None = None
    month: int | None = None
    day: int | None = None
    hour: int | None = None
    minute: int | None = None
    second: int | None = None
    microsecond: int | None = None
    zone: str | None = None
    abbreviation: str | None = None
    epoch: int | None = None
    reset: bool = False
    meridiem: str | None = field(default=None, repr=False)

    @property
    def has_time(self) -> bool:
        """True when any of hour, minute or second were parsed."""
        return any(v is not None for v in (self.hour, self.minute, self.second))


def _compile(pattern: str) -> tuple[re.Pattern[str], list[tuple[str, str]]]:
    """Translate a pattern into a regex and an ordered list of actions.

    Each action is `(kind, group)`; resets use the kinds `"!"` and `"|"`.
    """
    regex: list[str] = []
    actions: list[tuple[str, str]] = []
    chars = iter(pattern)
    for index, char in enumerate(chars):
        if char == "\\":
            regex.append(re.escape(next(chars, "")))
        elif char in (_RESET_ALL, _RESET_UNPARSED):
            actions.append((char, ""))
        elif char in _PARSERS:
            kind, expr = _PARSERS[char]
            group = f"g{index}"
            regex.append(f"(?P<{group}>{expr})")
            actions.append((kind, group))
        elif char in _FORMATTERS:
            raise ValueError(f"pattern character '{char}' cannot be parsed")
        else:
            regex.append(re.escape(char))
    return re.compile("".join(regex)), actions


def _month_from_name(value: str) -> int:
    lowered = value.lower()
    for number, name in enumerate(MONTH_NAMES, start=1):
        if lowered in (name.lower(), name[:3].lower()):
            return number
    raise ValueError(f"unknown month name '{value}'")


def _apply(fields: ParsedFields, kind: str, value: str) -> None:
    if kind in ("day", "month", "year", "hour", "minute", "second", "epoch"):
        setattr(fields, kind, int(value))
    elif kind == "month_name":
        fields.month = _month_from_name(value)
    elif kind == "year2":
        short = int(value)
        fields.year = 1900 + short if short >= 70 else 2000 + short
    elif kind == "hour12":
        fields.hour = int(value)
        fields.meridiem = fields.meridiem or ""
    elif kind == "microsecond":
        fields.microsecond = int(value.ljust(6, "0"))
    elif kind == "millisecond":
        fields.microsecond = int(value.ljust(3, "0")) * 1000
    elif kind == "meridiem":
        fields.meridiem = value.lower()
    elif kind == "zone":
        fields.zone = value
    elif kind == "abbreviation":
        fields.abbreviation = value
    # weekday names are accepted but carry no information


def _resolve_meridiem(fields: ParsedFields) -> None:
    if fields.meridiem is None:
        return
    if fields.hour is None or not fields.meridiem:
        raise ValueError("meridian requires both a 12-hour hour and AM/PM")
    if not 1 <= fields.hour <= 12:
        raise ValueError(f"12-hour clock hour out of range: {fields.hour}")
    fields.hour = fields.hour % 12 + (12 if fields.meridiem == "pm" else 0)


def parse_fields(pattern: str, text: str) -> ParsedFields:
    """Extract raw fields from `text` according to a date()-style pattern.

    Raises:
        FormatError: If the pattern contains a character that cannot be
            parsed, or the text does not match it.
    """
    try:
        regex, actions = _compile(pattern)
    except ValueError as e:
        raise FormatError(text, pattern, str(e)) from e
    if (match := regex.fullmatch(text)) is None:
        raise FormatError(text, pattern)
    fields = ParsedFields()
    try:
        for kind, group in actions:
            if kind == _RESET_ALL:
                fields = ParsedFields(reset=True)
            elif kind == _RESET_UNPARSED:
                fields.reset = True
            else:
                _apply(fields, kind, match[group])
        _resolve_meridiem(fields)
    except ValueError as e:
        raise FormatError(text, pattern, str(e)) from e
    return fields
