"""Independent per-record percentage sampling."""

from collections.abc import Iterable, Iterator

from loguru import logger

from datasample.core.errors import InvalidPercentageError
from datasample.core.rng import make_rng
from datasample.core.step import Step
from datasample.core.types import RandomSource, Record, T


def validate_percentage(percentage: float) -> float:
    """Return ``percentage`` as a probability in [0, 1], or raise."""
    if not 0.0 <= percentage <= 100.0:
        raise InvalidPercentageError(percentage)
    return percentage / 100.0


def bernoulli_select(
    records: Iterable[T], percentage: float, rng: RandomSource
) -> Iterator[T]:
    """
    Lazily keep each record independently with probability ``percentage / 100``.

    The percentage is validated immediately, before any record is pulled.
    One uniform draw is made per record and the record is kept iff the draw
    is strictly below the probability, so 0 keeps nothing and 100 keeps
    everything. Relative order is preserved.

    Raises:
        InvalidPercentageError: If ``percentage`` is outside [0, 100].
    """
    probability = validate_percentage(percentage)
    return _bernoulli_iter(records, probability, rng)


def _bernoulli_iter(
    records: Iterable[T], probability: float, rng: RandomSource
) -> Iterator[T]:
    for record in records:
        if rng.random() < probability:
            yield record


class PercentageSample(Step):
    """
    Keep each record with a fixed chance.

    Records are emitted as soon as they are drawn, so the step streams.

    Examples:
        >>> PercentageSample(5)
        >>> PercentageSample(12.5, seed=7, preserve_header=True)
    """

    def __init__(
        self,
        percentage: float,
        *,
        seed: int | None = None,
        rng: RandomSource | None = None,
        preserve_header: bool = False,
    ) -> None:
        """
        Initialize a PercentageSample step.

        Args:
            percentage: Chance (0-100) that each record is kept.
            seed: Random seed for reproducibility. Ignored when ``rng`` is given.
            rng: Explicit random source, mostly for tests.
            preserve_header: Pass the first record through unsampled.
        """
        super().__init__()
        validate_percentage(percentage)

        self._percentage = percentage
        self._seed = seed
        self._rng = rng
        self._preserve_header = preserve_header

    def process(self, records: Iterable[Record]) -> Iterable[Record]:
        """Yield the optional header followed by the kept records."""
        iterator = iter(records)

        if self._preserve_header:
            for header in iterator:
                yield header
                break

        rng = self._rng if self._rng is not None else make_rng(self._seed)
        logger.info(f"Sampling {self._percentage}% of records")

        kept = 0
        for record in bernoulli_select(iterator, self._percentage, rng):
            kept += 1
            yield record

        logger.info(f"Kept {kept} records")
