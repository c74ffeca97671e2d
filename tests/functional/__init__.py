"""Functional tests.

Purpose
- Document the timezone rules as scenarios a reader can follow top to bottom.

Guidelines
- Use only the public API (`datetimezone`, `datetimezone.formats`).
- One rule per test; the docstring states the rule, the asserts prove it.
- Compare instants with `assert_same_instant` when the attached timezones
  are expected to differ.
"""
