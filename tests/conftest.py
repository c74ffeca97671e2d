"""Global pytest fixtures for datetimezone."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from datetimezone import timezones

# pylint: disable=unused-argument

pytest_plugins = [
    "tests.fixtures.clock",
    "tests.fixtures.sqlite",
]

TESTS_ROOT = Path(__file__).parent.resolve()

#: folder under tests/ -> default marker
FOLDER_MARKERS = {
    "unit": pytest.mark.unit,
    "integration": pytest.mark.integration,
    "functional": pytest.mark.functional,
}


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Add the default mark of the folder each item lives in."""
    for item in items:
        path = item.path.resolve()  # pytest>=8: pathlib.Path
        if TESTS_ROOT not in path.parents:
            continue
        folder = path.relative_to(TESTS_ROOT).parts[0]
        if (marker := FOLDER_MARKERS.get(folder)) is None:
            continue
        if not any(m.name == marker.name for m in item.iter_markers()):
            item.add_marker(marker)


@pytest.fixture(autouse=True)
def utc_default_timezone() -> Iterator[None]:
    """Make tests independent from the process configuration.

    Every test starts with the default timezone set to UTC; whatever a test
    sets is dropped afterwards.
    """
    timezones.set_default_timezone("UTC")
    yield
    timezones.reset_default_timezone()
