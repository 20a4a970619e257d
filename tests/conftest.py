from __future__ import annotations

from collections.abc import Iterator

import pytest

from fletcher.events import reset_event_bus_for_testing


@pytest.fixture(autouse=True)
def clear_event_bus() -> Iterator[None]:
    """Reset the global event bus before and after each test."""
    reset_event_bus_for_testing()
    yield
    reset_event_bus_for_testing()
