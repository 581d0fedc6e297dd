"""Fixed-size uniform sampling without replacement (reservoir sampling)."""

from collections.abc import Iterable

from loguru import logger

from datasample.core.errors import InvalidSampleSizeError
from datasample.core.rng import make_rng
from datasample.core.step import Step
from datasample.core.types import RandomSource, Record, T


def reservoir_select(records: Iterable[T], k: int, rng: RandomSource) -> list[T]:
    """
    Select ``min(n, k)`` records uniformly at random in a single pass.

    Uses Algorithm R: the first ``k`` records fill the reservoir in order,
    and the i-th record after that replaces slot ``j`` when a draw
    ``j in [0, i)`` lands below ``k``. Records that are never evicted keep
    their input order, so an input of at most ``k`` records comes back
    unchanged.

    Args:
        records: Finite iterable of records. Consumed exactly once.
        k: Reservoir capacity, at least 1.
        rng: Source of uniform integer draws.

    Returns:
        The final reservoir contents in slot order.

    Raises:
        InvalidSampleSizeError: If ``k`` is smaller than 1.
    """
    if k < 1:
        raise InvalidSampleSizeError(k)

    reservoir: list[T] = []
    count = 0

    for record in records:
        count += 1
        if count <= k:
            reservoir.append(record)
        else:
            j = rng.randrange(count)
            if j < k:
                reservoir[j] = record

    return reservoir


class ReservoirSample(Step):
    """
    Keep a fixed number of records chosen uniformly at random.

    The step consumes its whole input before emitting anything, since the
    reservoir is only final after the last record.

    Examples:
        >>> ReservoirSample(10)
        >>> ReservoirSample(100, seed=42, preserve_header=True)
    """

    def __init__(
        self,
        k: int,
        *,
        seed: int | None = None,
        rng: RandomSource | None = None,
        preserve_header: bool = False,
    ) -> None:
        """
        Initialize a ReservoirSample step.

        Args:
            k: Number of records to keep.
            seed: Random seed for reproducibility. Ignored when ``rng`` is given.
            rng: Explicit random source, mostly for tests.
            preserve_header: Pass the first record through unsampled.
        """
        super().__init__()

        if k < 1:
            raise InvalidSampleSizeError(k)

        self._k = k
        self._seed = seed
        self._rng = rng
        self._preserve_header = preserve_header

    def process(self, records: Iterable[Record]) -> Iterable[Record]:
        """Yield the optional header followed by the reservoir."""
        iterator = iter(records)

        if self._preserve_header:
            for header in iterator:
                yield header
                break

        rng = self._rng if self._rng is not None else make_rng(self._seed)
        selected = reservoir_select(iterator, self._k, rng)
        logger.info(f"Reservoir kept {len(selected)} records (k={self._k})")
        yield from selected
