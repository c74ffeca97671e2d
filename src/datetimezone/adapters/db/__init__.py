"""SQLAlchemy integration."""

from datetimezone.adapters.db.dialects import DialectName, UnsupportedDialect
from datetimezone.adapters.db.sa_types import EpochSeconds, UTCDateTime, WallClockDateTime

__all__ = [
    "DialectName",
    "EpochSeconds",
    "UTCDateTime",
    "UnsupportedDialect",
    "WallClockDateTime",
]
