"""Unit tests for datetimezone.timezones."""

from __future__ import annotations

import re
from datetime import timedelta
from zoneinfo import ZoneInfo

import pytest

from datetimezone import Instant, config, timezones
from datetimezone.errors import UnknownTimezoneError
from datetimezone.logging import TimezoneEvent
from datetimezone.timezones import (
    UTC_OFFSET,
    default_timezone,
    fixed_offset,
    from_abbreviation,
    get_default_timezone,
    get_timezone,
    reset_default_timezone,
    set_default_timezone,
)

# pylint: disable=magic-value-comparison

JANUARY = Instant(1388577600)  # 2014-01-01 12:00:00 UTC
AUGUST = Instant(1406894400)  # 2014-08-01 12:00:00 UTC


class TestGetTimezone:
    """Tests for resolving timezone names."""

    @staticmethod
    @pytest.mark.parametrize("name", ["Europe/Paris", "America/Los_Angeles", "UTC"])
    def test_region_identifier(name: str) -> None:
        """Region identifiers keep their name and use zoneinfo."""
        zone = get_timezone(name)
        assert zone.name == name
        assert zone.tzinfo == ZoneInfo(name)
        assert not zone.is_fixed_offset

    @staticmethod
    @pytest.mark.parametrize(
        "text, name, seconds",
        [
            ("+00:00", "+00:00", 0),
            ("+0000", "+00:00", 0),
            ("Z", "+00:00", 0),
            ("+01", "+01:00", 3600),
            ("-0800", "-08:00", -8 * 3600),
            ("+05:30", "+05:30", 5 * 3600 + 1800),
            ("-00:30", "-00:30", -1800),
        ],
    )
    def test_offset_forms(text: str, name: str, seconds: int) -> None:
        """Offsets in every accepted form get a canonical +HH:MM name."""
        zone = get_timezone(text)
        assert zone.name == name
        assert zone.is_fixed_offset
        assert zone.offset_at(JANUARY) == timedelta(seconds=seconds)

    @staticmethod
    @pytest.mark.parametrize(
        "name",
        [
            "Mars/Olympus_Mons",
            "",
            "+25:00",
            "+01:75",
            "+05:",
            "../etc/passwd",
            "Paris",
            "Europe",
            "America",
        ],
    )
    def test_unknown(name: str) -> None:
        """Unknown names raise UnknownTimezoneError naming the culprit."""
        with pytest.raises(UnknownTimezoneError, match=re.escape(f"'{name}'")):
            get_timezone(name)

    @staticmethod
    def test_cached() -> None:
        """Resolving the same name twice returns the same object."""
        assert get_timezone("Europe/Paris") is get_timezone("Europe/Paris")


class TestTimezone:
    """Tests for the Timezone value object."""

    @staticmethod
    def test_equality_is_by_name() -> None:
        """A named zone and a fixed offset differ even at equal offsets."""
        assert get_timezone("UTC") != UTC_OFFSET
        assert get_timezone("+0000") == UTC_OFFSET
        assert hash(get_timezone("+0000")) == hash(UTC_OFFSET)

    @staticmethod
    def test_offset_follows_daylight_saving() -> None:
        """Region zones change offset with DST, fixed offsets do not."""
        paris = get_timezone("Europe/Paris")
        assert paris.offset_at(JANUARY) == timedelta(hours=1)
        assert paris.offset_at(AUGUST) == timedelta(hours=2)
        plus_one = get_timezone("+01:00")
        assert plus_one.offset_at(JANUARY) == plus_one.offset_at(AUGUST)

    @staticmethod
    def test_str_is_name() -> None:
        """str() gives the canonical name."""
        assert str(get_timezone("-0330")) == "-03:30"


class TestFixedOffset:
    """Tests for fixed_offset()."""

    @staticmethod
    def test_name_and_tzname() -> None:
        """The tzinfo reports the canonical name as its abbreviation."""
        zone = fixed_offset(-5 * 3600)
        assert zone.name == "-05:00"
        assert zone.tzinfo.tzname(None) == "-05:00"

    @staticmethod
    @pytest.mark.parametrize("seconds", [86400, -86400, 30])
    def test_out_of_range(seconds: int) -> None:
        """Offsets of a day or more, or with seconds, are rejected."""
        with pytest.raises(UnknownTimezoneError):
            fixed_offset(seconds)


class TestFromAbbreviation:
    """Tests for from_abbreviation()."""

    @staticmethod
    @pytest.mark.parametrize(
        "abbreviation, name",
        [
            ("CEST", "+02:00"),
            ("CET", "+01:00"),
            ("PDT", "-07:00"),
            ("pst", "-08:00"),
            ("BST", "+01:00"),
            ("GMT", "+00:00"),
            ("UTC", "+00:00"),
        ],
    )
    def test_known(abbreviation: str, name: str) -> None:
        """Abbreviations map to the fixed offset they denote."""
        zone = from_abbreviation(abbreviation)
        assert zone.name == name
        assert zone.is_fixed_offset

    @staticmethod
    @pytest.mark.parametrize(
        "text, name", [("+05:30", "+05:30"), ("+03", "+03:00"), ("Z", "+00:00")]
    )
    def test_offsets_fall_through(text: str, name: str) -> None:
        """Offsets rendered as abbreviations resolve like get_timezone()."""
        assert from_abbreviation(text).name == name

    @staticmethod
    @pytest.mark.parametrize("text", ["XYZT", "Europe"])
    def test_unknown(text: str) -> None:
        """Text that is neither raises UnknownTimezoneError."""
        with pytest.raises(UnknownTimezoneError):
            from_abbreviation(text)


class TestDefaultTimezone:
    """Tests for the process-wide default timezone."""

    @staticmethod
    def test_set_and_get() -> None:
        """The value set is the value read."""
        returned = set_default_timezone("Asia/Tokyo")
        assert returned == get_default_timezone() == get_timezone("Asia/Tokyo")

    @staticmethod
    def test_set_unknown_keeps_previous() -> None:
        """A bad name raises and leaves the default untouched."""
        with pytest.raises(UnknownTimezoneError):
            set_default_timezone("Nowhere/Land")
        assert get_default_timezone().name == "UTC"

    @staticmethod
    def test_reset_reads_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
        """After a reset, the next read consults configuration again."""
        monkeypatch.setenv(config.DEFAULT_TIMEZONE_ENV_VAR, "Europe/Paris")
        reset_default_timezone()
        assert get_default_timezone().name == "Europe/Paris"

    @staticmethod
    def test_reset_with_bad_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
        """A misconfigured default surfaces on first use."""
        monkeypatch.setenv(config.DEFAULT_TIMEZONE_ENV_VAR, "Nowhere/Land")
        reset_default_timezone()
        with pytest.raises(UnknownTimezoneError):
            get_default_timezone()

    @staticmethod
    def test_context_manager_restores() -> None:
        """default_timezone() restores the previous value on exit."""
        with default_timezone("Europe/Paris") as zone:
            assert zone.name == "Europe/Paris"
            assert get_default_timezone() is zone
            with default_timezone("America/Los_Angeles"):
                assert get_default_timezone().name == "America/Los_Angeles"
            assert get_default_timezone().name == "Europe/Paris"
        assert get_default_timezone().name == "UTC"

    @staticmethod
    def test_context_manager_restores_on_error() -> None:
        """The previous value comes back even when the block raises."""
        with pytest.raises(RuntimeError):
            with default_timezone("Europe/Paris"):
                raise RuntimeError("boom")
        assert get_default_timezone().name == "UTC"

    @staticmethod
    def test_debug_log(caplog: pytest.LogCaptureFixture) -> None:
        """Changing the default is logged at DEBUG level."""
        with caplog.at_level("DEBUG", logger=timezones.__name__):
            set_default_timezone("Europe/Paris")
        assert "Default timezone set to Europe/Paris" in caplog.text
        [record] = [r for r in caplog.records if r.name == timezones.__name__]
        assert record.timezone_event is TimezoneEvent.DEFAULT_CHANGED  # type: ignore[attr-defined]
