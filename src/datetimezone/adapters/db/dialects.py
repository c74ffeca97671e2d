"""Utility enums and helpers for database dialect handling.

Column types need to know whether the backend keeps timezone information:
PostgreSQL stores `timestamptz`, SQLite stores naive text.
"""

from __future__ import annotations

from enum import Enum


class UnsupportedDialect(Exception):
    """Raised when an unsupported database dialect is encountered."""


class DialectName(str, Enum):
    """Enumeration of known SQLAlchemy dialect names.

    Attributes:
        POSTGRES: PostgreSQL dialect (``"postgresql"``).
        SQLITE:   SQLite dialect (``"sqlite"``).
        MYSQL:    MySQL/MariaDB dialect (``"mysql"``).
    """

    POSTGRES = "postgresql"
    SQLITE = "sqlite"
    MYSQL = "mysql"

    @classmethod
    def from_string(cls, dialect_str: str) -> DialectName:
        """Normalize and convert an arbitrary dialect string to DialectName.

        Accepts common aliases and driver-qualified names (e.g., 'postgres',
        'postgresql+psycopg', 'sqlite+pysqlite', 'mariadb').

        Raises:
            UnsupportedDialect: if the dialect is not recognized.
        """
        raw = (dialect_str or "").strip().lower()
        base = raw.split("+", 1)[0]

        if base in {"postgres", "postgresql", "pg"}:
            return cls.POSTGRES
        if base in {"sqlite"}:
            return cls.SQLITE
        if base in {"mysql", "mariadb"}:
            return cls.MYSQL

        raise UnsupportedDialect(f"Unsupported dialect: {dialect_str!r}")

    @property
    def keeps_timezone(self) -> bool:
        """True when the backend's timezone-aware DateTime keeps the offset."""
        return self is DialectName.POSTGRES
