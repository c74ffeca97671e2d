"""Unit tests.

Purpose
- Verify a single module in isolation.

Guidelines
- No real I/O; freeze the clock with the `frozen_clock` fixture.
- Use fixed instants and zones with stable rules (2014, Europe/Paris,
  America/Los_Angeles) so expected strings can be checked by hand.
"""
