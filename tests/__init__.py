"""datetimezone test suite.

Folder taxonomy
- unit/         : Isolated, fast checks of a single module/class/function.
- integration/  : Real interactions with a database engine (in-memory SQLite).
- functional/   : The timezone rules, written as executable scenarios.
- fixtures/     : Shared pytest fixtures (clock, engines).
- helpers/      : Shared utilities (no tests here).

General guidance
- Every test starts with the default timezone set to UTC, so results do not
  depend on the machine running them.
- Freeze the clock (`frozen_clock`) whenever a test builds "now".
"""
