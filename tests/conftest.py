from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import pytest

from talentscout.settings import settings


@pytest.fixture
def override_settings() -> Iterator[Callable[..., None]]:
    previous: dict[str, Any] = {}

    def _override(**values: Any) -> None:
        for name, value in values.items():
            previous.setdefault(name, getattr(settings, name))
            object.__setattr__(settings, name, value)

    try:
        yield _override
    finally:
        for name, value in previous.items():
            object.__setattr__(settings, name, value)


@pytest.fixture
def recorded_sleeps() -> list[float]:
    return []


@pytest.fixture
def fake_sleep(recorded_sleeps: list[float]) -> Callable[[float], Any]:
    async def _sleep(seconds: float) -> None:
        recorded_sleeps.append(seconds)

    return _sleep
