"""Integration tests.

Purpose
- Exercise the column types against a real database engine.

Guidelines
- Use the engine fixtures from `tests/fixtures`; each test gets a fresh DB.
- Create tables on a local `MetaData` and drop them on teardown.
- Mark as 'integration' and keep them reliable.
"""
