"""Serialization rules against a real (in-memory SQLite) database.

A row is written while one default timezone is in effect and read back while
another is. The column types that keep the instant (UTC, epoch) or declare
their timezone (wall clock) read back the same instant; a bare DATETIME
column read back through the default timezone does not.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime
from typing import TYPE_CHECKING

import pytest
import sqlalchemy as sa

from datetimezone import (
    create_from_format,
    default_timezone,
    get_timezone,
    parse,
)
from datetimezone.adapters.db import EpochSeconds, UTCDateTime, WallClockDateTime
from datetimezone.formats import php

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

# adjust pylint for dealing with pytest fixtures
# pylint: disable=redefined-outer-name

DEPARTURE_TEXT = "2014-08-01 14:00:00"


@pytest.fixture
def departures(sqlite_engine_memory: Engine) -> Iterator[sa.Table]:
    """Create a table holding the same departure in four column types.

    Seeds two rows, written while the default timezone is Europe/Paris:
    - id=1 with every timestamp NULL
    - id=2 with the departure at 2014-08-01 14:00:00 Paris (12:00 UTC)
    """
    md = sa.MetaData()
    t = sa.Table(
        "departures",
        md,
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("utc_at", UTCDateTime(), nullable=True),
        sa.Column("epoch_at", EpochSeconds(), nullable=True),
        sa.Column("wall_at", WallClockDateTime("Europe/Paris"), nullable=True),
        sa.Column("naive_at", sa.DateTime(), nullable=True),
    )
    md.create_all(sqlite_engine_memory)
    with default_timezone("Europe/Paris"):
        departure = parse(DEPARTURE_TEXT)
        with sqlite_engine_memory.begin() as conn:
            conn.execute(
                sa.insert(t),
                [
                    {"id": 1, "utc_at": None, "epoch_at": None, "wall_at": None, "naive_at": None},
                    {
                        "id": 2,
                        "utc_at": departure,
                        "epoch_at": departure,
                        "wall_at": departure,
                        # what a DATETIME column keeps: the wall time only
                        "naive_at": departure.to_datetime().replace(tzinfo=None),
                    },
                ],
            )
    yield t
    md.drop_all(sqlite_engine_memory)


def _row(engine: Engine, table: sa.Table, row_id: int) -> sa.Row:
    with engine.begin() as conn:
        return conn.execute(sa.select(table).where(table.c.id == row_id)).one()


def test_null_round_trips(sqlite_engine_memory: Engine, departures: sa.Table):
    """NULL reads back as None for every column type."""
    row = _row(sqlite_engine_memory, departures, 1)
    assert row.utc_at is None
    assert row.epoch_at is None
    assert row.wall_at is None


def test_safe_columns_keep_the_instant(sqlite_engine_memory: Engine, departures: sa.Table):
    """UTC, epoch and declared wall-clock columns survive a new default."""
    expected = parse(DEPARTURE_TEXT, "Europe/Paris")
    with default_timezone("America/Los_Angeles"):
        row = _row(sqlite_engine_memory, departures, 2)

    assert row.utc_at.instant == expected.instant
    assert row.utc_at.timezone_name == "UTC"
    assert row.epoch_at.instant == expected.instant
    assert row.epoch_at.timezone_name == "+00:00"
    assert row.wall_at == expected


def test_datetime_column_read_through_default_drifts(
    sqlite_engine_memory: Engine, departures: sa.Table
):
    """A wall time read back through the default timezone moves in time."""
    expected = parse(DEPARTURE_TEXT, "Europe/Paris")
    with default_timezone("America/Los_Angeles"):
        naive = _row(sqlite_engine_memory, departures, 2).naive_at
        text = naive.strftime("%Y-%m-%d %H:%M:%S")
        drifted = create_from_format(php.SIMPLE_FORMAT, text)

    assert text == DEPARTURE_TEXT
    assert drifted.instant != expected.instant
    assert drifted.timestamp - expected.timestamp == 9 * 3600

    # Reading it with the timezone it was written in is correct.
    recovered = create_from_format(php.SIMPLE_FORMAT, text, get_timezone("Europe/Paris"))
    assert recovered == expected


def test_filter_on_utc_column(sqlite_engine_memory: Engine, departures: sa.Table):
    """Comparisons bind through the column type, whatever the value's zone."""
    before = parse("2014-08-01 04:59:59", "America/Los_Angeles")  # 11:59:59 UTC
    after = parse("2014-08-01 12:00:01 +0000")
    with sqlite_engine_memory.begin() as conn:
        count_after_before = conn.execute(
            sa.select(sa.func.count())  # pylint: disable=not-callable
            .select_from(departures)
            .where(departures.c.utc_at > before)
        ).scalar_one()
        count_after_after = conn.execute(
            sa.select(sa.func.count())  # pylint: disable=not-callable
            .select_from(departures)
            .where(departures.c.utc_at > after)
        ).scalar_one()
    assert count_after_before == 1
    assert count_after_after == 0


def test_naive_datetime_is_refused(sqlite_engine_memory: Engine, departures: sa.Table):
    """Binding a naive datetime to a timestamp column fails loudly."""
    with pytest.raises(sa.exc.StatementError, match="naive"):
        with sqlite_engine_memory.begin() as conn:
            conn.execute(sa.insert(departures), {"id": 3, "utc_at": datetime(2014, 8, 1)})
