"""SQLAlchemy column types for local timestamps.

Three ways to persist a timestamp, matching the serialization rules:

- `UTCDateTime`: the instant, normalized to UTC. Safe.
- `EpochSeconds`: the instant as integer epoch seconds. Safe.
- `WallClockDateTime`: a naive wall-clock time, as a `DATETIME` column stores
  it. Only safe because the column is declared with the one timezone its
  values were written in; it never consults the default timezone.

All types accept a `LocalTimestamp`, an `Instant` or an aware `datetime` on
bind, and return a `LocalTimestamp` on read. Naive datetimes are rejected.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from sqlalchemy import BigInteger, Integer
from sqlalchemy.types import DateTime, TypeDecorator

from datetimezone import timezones
from datetimezone.adapters.db.dialects import DialectName, UnsupportedDialect
from datetimezone.timezones import UTC_OFFSET, Timezone
from datetimezone.values import Instant, LocalTimestamp

if TYPE_CHECKING:
    from sqlalchemy.engine.interfaces import Dialect

__all__ = ["EpochSeconds", "UTCDateTime", "WallClockDateTime"]

BindValue = LocalTimestamp | Instant | datetime


def _keeps_timezone(dialect: Dialect) -> bool:
    try:
        return DialectName.from_string(dialect.name).keeps_timezone
    except UnsupportedDialect:
        # unknown backends: naive UTC
        return False


def _instant_of(value: BindValue) -> Instant:
    if isinstance(value, LocalTimestamp):
        return value.instant
    if isinstance(value, Instant):
        return value
    if isinstance(value, datetime):
        # raises ValueError for naive datetimes
        return Instant.from_datetime(value)
    raise TypeError(f"cannot bind {type(value).__name__} as a timestamp")


class UTCDateTime(TypeDecorator[LocalTimestamp]):  # pylint: disable=too-many-ancestors
    """Timestamp stored as UTC.

    Values read back are attached to the `UTC` timezone, whatever timezone
    they were written with.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: BindValue | None, dialect: Dialect) -> Any:
        if value is None:
            return None
        moment = _instant_of(value).to_datetime(UTC_OFFSET).astimezone(timezone.utc)
        # SQLite: store naïve UTC so it won't be reinterpreted as local
        return moment if _keeps_timezone(dialect) else moment.replace(tzinfo=None)

    def process_result_value(
        self, value: Any, dialect: Dialect
    ) -> LocalTimestamp | None:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return Instant.from_datetime(value).at("UTC")

    def process_literal_param(self, value: BindValue | None, dialect: Dialect) -> Any:
        return self.process_bind_param(value, dialect)

    @property
    def python_type(self) -> type[LocalTimestamp]:
        return LocalTimestamp


class EpochSeconds(TypeDecorator[LocalTimestamp]):  # pylint: disable=too-many-ancestors
    """Timestamp stored as integer seconds since the Unix epoch.

    Sub-second precision is dropped. Values read back are attached to
    `+00:00`, like `@<seconds>` text.
    """

    impl = BigInteger().with_variant(Integer(), "sqlite")
    cache_ok = True

    def process_bind_param(self, value: BindValue | None, dialect: Dialect) -> Any:
        if value is None:
            return None
        return _instant_of(value).seconds

    def process_result_value(
        self, value: Any, dialect: Dialect
    ) -> LocalTimestamp | None:
        if value is None:
            return None
        return LocalTimestamp(Instant(int(value)), UTC_OFFSET)

    def process_literal_param(self, value: BindValue | None, dialect: Dialect) -> Any:
        return self.process_bind_param(value, dialect)

    @property
    def python_type(self) -> type[LocalTimestamp]:
        return LocalTimestamp


class WallClockDateTime(TypeDecorator[LocalTimestamp]):  # pylint: disable=too-many-ancestors
    """Naive wall-clock timestamp in one explicitly declared timezone.

    Example:
        ```py
        sa.Column("departs_at", WallClockDateTime("Europe/Paris"))
        ```

    A wall time repeated by a DST shift cannot be told apart once stored; it
    reads back as the first occurrence.
    """

    impl = DateTime(timezone=False)
    cache_ok = True

    def __init__(self, timezone: Timezone | str, *args: Any, **kwargs: Any) -> None:  # pylint: disable=redefined-outer-name
        if timezone is None:
            raise TypeError("WallClockDateTime requires an explicit timezone")
        super().__init__(*args, **kwargs)
        self.timezone = (
            timezone if isinstance(timezone, Timezone) else timezones.get_timezone(timezone)
        )

    def process_bind_param(self, value: BindValue | None, dialect: Dialect) -> Any:
        if value is None:
            return None
        return _instant_of(value).to_datetime(self.timezone).replace(tzinfo=None)

    def process_result_value(
        self, value: Any, dialect: Dialect
    ) -> LocalTimestamp | None:
        if value is None:
            return None
        wall = value.replace(tzinfo=self.timezone.tzinfo, fold=0)
        return LocalTimestamp(Instant.from_datetime(wall), self.timezone)

    def process_literal_param(self, value: BindValue | None, dialect: Dialect) -> Any:
        return self.process_bind_param(value, dialect)

    @property
    def python_type(self) -> type[LocalTimestamp]:
        return LocalTimestamp
