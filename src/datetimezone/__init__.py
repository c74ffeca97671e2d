"""DATETIMEZONE

Timezone-aware timestamp construction and formatting with explicit rules
for the implicit default timezone, offset precedence and serialization.
The test suite doubles as executable documentation of those pitfalls.
"""

from datetimezone.construction import (
    TextShape,
    classify,
    create_from_format,
    format_timestamp,
    from_timestamp,
    now,
    parse,
    with_timezone,
)
from datetimezone.errors import DateTimeZoneError, FormatError, UnknownTimezoneError
from datetimezone.timezones import (
    Timezone,
    default_timezone,
    get_default_timezone,
    get_timezone,
    reset_default_timezone,
    set_default_timezone,
)
from datetimezone.values import Instant, LocalTimestamp

__all__ = [
    "__version__",
    "DateTimeZoneError",
    "FormatError",
    "Instant",
    "LocalTimestamp",
    "TextShape",
    "Timezone",
    "UnknownTimezoneError",
    "classify",
    "create_from_format",
    "default_timezone",
    "format_timestamp",
    "from_timestamp",
    "get_default_timezone",
    "get_timezone",
    "now",
    "parse",
    "reset_default_timezone",
    "set_default_timezone",
    "with_timezone",
]
__version__ = "0.1.0"
