"""Error definitions for datetimezone."""

# ============================================================================
#                           General errors
# ============================================================================


class DateTimeZoneError(Exception):
    """Base class for datetimezone errors."""


# ============================================================================
#                   Construction and formatting errors
# ============================================================================


class FormatError(DateTimeZoneError, ValueError):
    """Raised when text cannot be parsed, or does not match a pattern."""

    def __init__(self, text: str, pattern: str | None = None, reason: str = "") -> None:
        if pattern is None:
            message = f"Unrecognized date/time text '{text}'"
        else:
            message = f"Text '{text}' does not match pattern '{pattern}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message + ".")
        self.text = text
        self.pattern = pattern
        self.reason = reason


class UnknownTimezoneError(DateTimeZoneError, LookupError):
    """Raised when a timezone identifier is not recognized."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown or bad timezone '{name}'.")
        self.name = name
