"""Pattern languages used to render and read timestamps.

- `php`: date()-style patterns (`Y-m-d H:i:s`), the primary syntax.
- `icu`: ICU-style patterns (`yyyy-MM-dd HH:mm:ss`) for display formatters.
"""
