"""Shared fixtures for datasample tests."""

import pytest


class SequenceRandom:
    """Random source replaying fixed draws and recording what was asked."""

    def __init__(self, ints: list[int] | None = None, floats: list[float] | None = None) -> None:
        self._ints = list(ints or [])
        self._floats = list(floats or [])
        self.stops: list[int] = []
        self.float_calls = 0

    def randrange(self, stop: int) -> int:
        self.stops.append(stop)
        value = self._ints.pop(0)
        assert 0 <= value < stop, f"scripted draw {value} outside [0, {stop})"
        return value

    def random(self) -> float:
        self.float_calls += 1
        return self._floats.pop(0)


@pytest.fixture
def sequence_random():
    """Factory for random sources with scripted draws."""
    return SequenceRandom


@pytest.fixture
def events_csv() -> str:
    return (
        "id,name,value\n"
        "1,Alice,100\n"
        "2,Bob,200\n"
        "1,Alice,300\n"
        "3,Charlie,400\n"
        "2,Bob,500\n"
        "4,Dave,600\n"
    )
