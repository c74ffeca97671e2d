"""Timezone value objects and the process-wide default timezone.

A `Timezone` is either a region identifier backed by the IANA database
(`Europe/Paris`, `UTC`) or a fixed UTC offset named `+HH:MM`. The ambient
default timezone is module state: it is consulted by every construction call
that omits an explicit timezone, and it is deliberately not synchronized.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError, available_timezones

from datetimezone import config
from datetimezone.errors import UnknownTimezoneError
from datetimezone.logging import TimezoneEvent

if TYPE_CHECKING:
    from datetimezone.values import Instant

__all__ = [
    "Timezone",
    "UTC_OFFSET",
    "default_timezone",
    "fixed_offset",
    "from_abbreviation",
    "get_default_timezone",
    "get_timezone",
    "reset_default_timezone",
    "set_default_timezone",
]

logger = logging.getLogger(__name__)

_OFFSET_RE = re.compile(r"^(?P<sign>[+-])(?P<hours>\d{2})(?::?(?P<minutes>\d{2}))?$")
_MAX_OFFSET_SECONDS = 24 * 3600


@dataclass(frozen=True)
class Timezone:
    """Named rule mapping instants to a local UTC offset.

    Equality and hashing only consider `name`, so `Europe/Paris` and a fixed
    `+01:00` are different timezones even when their offsets agree.
    """

    name: str
    tzinfo: tzinfo = field(compare=False, repr=False)

    @property
    def is_fixed_offset(self) -> bool:
        """True for `+HH:MM` style zones."""
        return isinstance(self.tzinfo, timezone)

    def offset_at(self, instant: Instant) -> timedelta:
        """Return the UTC offset in effect at `instant`."""
        return instant.to_datetime(self).utcoffset() or timedelta(0)

    def __str__(self) -> str:
        return self.name


def _offset_name(total_seconds: int) -> str:
    sign = "-" if total_seconds < 0 else "+"
    minutes = abs(total_seconds) // 60
    return f"{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def fixed_offset(seconds: int) -> Timezone:
    """Build a fixed-offset timezone named `+HH:MM`.

    Args:
        seconds: Offset from UTC in seconds; must be a whole number of minutes
            strictly inside one day.

    Raises:
        UnknownTimezoneError: If the offset is out of range.
    """
    if abs(seconds) >= _MAX_OFFSET_SECONDS or seconds % 60:
        raise UnknownTimezoneError(_offset_name(seconds))
    name = _offset_name(seconds)
    return Timezone(name=name, tzinfo=timezone(timedelta(seconds=seconds), name))


UTC_OFFSET = fixed_offset(0)


@lru_cache(maxsize=256)
def get_timezone(name: str) -> Timezone:
    """Resolve a timezone identifier or offset string.

    Accepts IANA identifiers (`Europe/Paris`, `UTC`), offsets written as
    `+HH:MM`, `+HHMM` or `+HH`, and `Z` (an alias of `+00:00`).

    Raises:
        UnknownTimezoneError: If `name` is not a recognized timezone.
    """
    if name == "Z":
        return UTC_OFFSET
    if match := _OFFSET_RE.match(name):
        minutes = int(match["minutes"] or 0)
        if minutes >= 60:
            raise UnknownTimezoneError(name)
        seconds = (int(match["hours"]) * 60 + minutes) * 60
        return fixed_offset(-seconds if match["sign"] == "-" else seconds)
    try:
        zone = ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        # OSError: region directories such as "Europe"
        raise UnknownTimezoneError(name) from e
    return Timezone(name=name, tzinfo=zone)


#: moments at which region zones are sampled for their abbreviations
_ABBREVIATION_SAMPLES = (
    datetime(2014, 1, 15, 12, tzinfo=timezone.utc),
    datetime(2014, 7, 15, 12, tzinfo=timezone.utc),
)


@lru_cache(maxsize=1)
def _abbreviation_offsets() -> dict[str, int]:
    """Map alphabetic abbreviations (`CEST`, `PDT`) to UTC offsets in seconds.

    Zones are scanned in sorted order and the first zone using an abbreviation
    decides its offset, so `CST` is North American Central time rather than
    China Standard Time.
    """
    table: dict[str, int] = {}
    for name in sorted(available_timezones()):
        zone = ZoneInfo(name)
        for moment in _ABBREVIATION_SAMPLES:
            local = moment.astimezone(zone)
            abbreviation, offset = local.tzname(), local.utcoffset()
            if abbreviation and abbreviation.isalpha() and offset is not None:
                table.setdefault(abbreviation.upper(), int(offset.total_seconds()))
    return table


def from_abbreviation(abbreviation: str) -> Timezone:
    """Resolve a timezone abbreviation as rendered by the `T` pattern letter.

    Abbreviations denote a fixed offset (`CEST` is `+02:00`), not a region.
    Text that is not a known abbreviation is resolved with `get_timezone`,
    which covers offsets (`+05:30`) and identifiers (`UTC`).

    Raises:
        UnknownTimezoneError: If `abbreviation` is neither.
    """
    seconds = _abbreviation_offsets().get(abbreviation.upper())
    if seconds is None:
        return get_timezone(abbreviation)
    return fixed_offset(seconds)


def _as_timezone(value: Timezone | str) -> Timezone:
    return value if isinstance(value, Timezone) else get_timezone(value)


# ============================================================================
#                       Ambient default timezone
# ============================================================================

_default: Timezone | None = None


def get_default_timezone() -> Timezone:
    """Return the ambient default timezone.

    Initialized lazily from configuration the first time it is read, or after
    `reset_default_timezone()`.
    """
    global _default  # pylint: disable=global-statement
    if _default is None:
        _default = get_timezone(config.get_default_timezone_name())
        logger.debug("Default timezone initialized from config: %s", _default)
    return _default


def set_default_timezone(name: Timezone | str) -> Timezone:
    """Set the ambient default timezone for subsequent constructions.

    Already constructed values keep the timezone they were built with.

    Raises:
        UnknownTimezoneError: If `name` is not a recognized timezone.
    """
    global _default  # pylint: disable=global-statement
    _default = _as_timezone(name)
    logger.debug(
        "Default timezone set to %s", _default, extra=TimezoneEvent.DEFAULT_CHANGED.extra()
    )
    return _default


def reset_default_timezone() -> None:
    """Forget any override so the next read consults configuration again."""
    global _default  # pylint: disable=global-statement
    _default = None


@contextmanager
def default_timezone(name: Timezone | str) -> Iterator[Timezone]:
    """Temporarily swap the ambient default timezone.

    Example:
        ```py
        with default_timezone("Europe/Paris"):
            parse("2014-01-01 12:00:00")  # attached to Europe/Paris
        ```
    """
    global _default  # pylint: disable=global-statement
    previous = _default
    try:
        yield set_default_timezone(name)
    finally:
        _default = previous
