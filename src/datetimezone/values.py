"""Module including the timestamp value objects.

`Instant` is an absolute point in time; `LocalTimestamp` pairs an instant with
the timezone used to display it. Both are immutable.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import total_ordering

from datetimezone import timezones
from datetimezone.formats import php
from datetimezone.timezones import Timezone

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _epoch_seconds(moment: datetime) -> int:
    delta = moment - _EPOCH
    return delta.days * 86400 + delta.seconds


#: Range of `Instant.seconds`: a day inside what `datetime` can hold, so that
#: every instant can be expressed in every timezone.
MIN_SECONDS = _epoch_seconds(datetime.min.replace(tzinfo=timezone.utc)) + 86400
MAX_SECONDS = _epoch_seconds(datetime.max.replace(tzinfo=timezone.utc)) - 86400


@total_ordering
@dataclass(frozen=True, eq=False)
class Instant:
    """Point in time counted from the Unix epoch.

    Equality and ordering compare the epoch value only. `seconds` stays
    within `MIN_SECONDS` and `MAX_SECONDS`.
    """

    seconds: int
    microsecond: int = 0

    def __post_init__(self) -> None:
        if not MIN_SECONDS <= self.seconds <= MAX_SECONDS:
            raise ValueError(
                f"epoch seconds must be in {MIN_SECONDS}..{MAX_SECONDS}, got {self.seconds}"
            )
        if not 0 <= self.microsecond < 1_000_000:
            raise ValueError(f"microsecond must be in 0..999999, got {self.microsecond}")

    @classmethod
    def from_datetime(cls, value: datetime) -> Instant:
        """Build an instant from an aware datetime.

        Raises:
            ValueError: If `value` is naive or out of range.
        """
        if value.tzinfo is None or value.utcoffset() is None:
            raise ValueError("cannot take the instant of a naive datetime")
        delta = value - _EPOCH
        return cls(delta.days * 86400 + delta.seconds, delta.microseconds)

    @property
    def timestamp(self) -> int:
        """Whole seconds since the epoch."""
        return self.seconds

    def to_datetime(self, tz: Timezone | str = "UTC") -> datetime:
        """Return an aware datetime for this instant, expressed in `tz`."""
        zone = tz if isinstance(tz, Timezone) else timezones.get_timezone(tz)
        moment = _EPOCH + timedelta(seconds=self.seconds, microseconds=self.microsecond)
        return moment.astimezone(zone.tzinfo)

    def at(self, tz: Timezone | str) -> LocalTimestamp:
        """Pair this instant with a display timezone."""
        zone = tz if isinstance(tz, Timezone) else timezones.get_timezone(tz)
        return LocalTimestamp(self, zone)

    def format(self, pattern: str, tz: Timezone | str | None = None) -> str:
        """Format this instant in `tz`, or in the ambient default timezone.

        Without `tz` the output depends on process configuration; prefer
        `at(tz).format(pattern)`.
        """
        return self.at(tz if tz is not None else timezones.get_default_timezone()).format(
            pattern
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return (self.seconds, self.microsecond) == (other.seconds, other.microsecond)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return (self.seconds, self.microsecond) < (other.seconds, other.microsecond)

    def __hash__(self) -> int:
        return hash((self.seconds, self.microsecond))


@dataclass(frozen=True)
class LocalTimestamp:
    """An instant paired with the timezone it is displayed in.

    Two local timestamps are equal only when both the instant and the timezone
    name match.
    """

    instant: Instant
    timezone: Timezone

    @property
    def timestamp(self) -> int:
        """Whole seconds since the epoch."""
        return self.instant.seconds

    @property
    def timezone_name(self) -> str:
        """Name of the attached timezone (e.g. `Europe/Paris` or `+00:00`)."""
        return self.timezone.name

    @property
    def offset(self) -> timedelta:
        """UTC offset of the attached timezone at this instant."""
        return self.timezone.offset_at(self.instant)

    def to_datetime(self) -> datetime:
        """Return an aware stdlib datetime in the attached timezone."""
        return self.instant.to_datetime(self.timezone)

    def with_timezone(self, tz: Timezone | str) -> LocalTimestamp:
        """Re-express the same instant in another timezone."""
        return self.instant.at(tz)

    def clone(self) -> LocalTimestamp:
        """Return an equal copy; values are immutable so this is mostly sugar."""
        return LocalTimestamp(self.instant, self.timezone)

    def format(self, pattern: str) -> str:
        """Format with a date()-style pattern, e.g. `Y-m-d H:i:s`."""
        return php.format_datetime(self.to_datetime(), pattern, self.timezone.name)

    def __str__(self) -> str:
        return self.format(php.ATOM)
