"""Shared types for datasample."""

from typing import Any, Protocol, TypeVar

Record = Any
"""An opaque unit of input: a line of text, a decoded row, or any object."""

Row = list[str]
"""A decoded tabular row. The header is a Row as well."""

T = TypeVar("T")


class RandomSource(Protocol):
    """Random capability injected into the selectors.

    ``random.Random`` satisfies this protocol, so does any test double that
    returns a fixed sequence of draws.
    """

    def randrange(self, stop: int) -> int:
        """Return a uniform integer in ``[0, stop)``."""
        ...

    def random(self) -> float:
        """Return a uniform float in ``[0.0, 1.0)``."""
        ...
