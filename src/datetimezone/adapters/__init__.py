"""Adapters binding datetimezone values to external systems."""
