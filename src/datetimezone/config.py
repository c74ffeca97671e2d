"""Configuration utilities for datetimezone.

This module centralizes the process configuration consulted when no explicit
timezone is supplied.
"""

import os

DEFAULT_TIMEZONE_ENV_VAR = "DATETIMEZONE_DEFAULT_TIMEZONE"  # pragma: no mutate
FALLBACK_TIMEZONE = "UTC"  # pragma: no mutate


def get_default_timezone_name() -> str:
    """Get the configured default timezone name.

    Returns:
        The value of the `DATETIMEZONE_DEFAULT_TIMEZONE` environment variable,
        or `FALLBACK_TIMEZONE` when it is unset or empty.
    """
    if not (name := os.environ.get(DEFAULT_TIMEZONE_ENV_VAR, "").strip()):
        return FALLBACK_TIMEZONE
    return name
