"""Sample factory for building sampling steps."""

from datasample.core.types import RandomSource
from datasample.transforms.bernoulli import PercentageSample
from datasample.transforms.grouped import GroupedHashSample, Hasher, python_hash
from datasample.transforms.reservoir import ReservoirSample


class Sample:
    """
    Factory class for creating sampling steps.

    Strategies:
        - "reservoir": Exactly k records, uniform without replacement
        - "percentage": Each record kept independently with a fixed chance
        - "grouped": All rows sharing a key value kept or dropped together

    Examples:
        >>> # 100 random lines
        >>> Sample.reservoir(100, seed=42)

        >>> # About 5% of lines, streaming
        >>> Sample.percentage(5)

        >>> # About 10% of users, with all of their rows
        >>> Sample.grouped("user_id", 10)
    """

    @staticmethod
    def reservoir(
        k: int,
        seed: int | None = None,
        rng: RandomSource | None = None,
        preserve_header: bool = False,
    ) -> ReservoirSample:
        """
        Keep exactly ``k`` records (fewer if the input is shorter).

        Args:
            k: Number of records to keep.
            seed: Random seed for reproducibility.
            rng: Explicit random source.
            preserve_header: Pass the first record through unsampled.

        Returns:
            A ReservoirSample step.
        """
        return ReservoirSample(
            k, seed=seed, rng=rng, preserve_header=preserve_header
        )

    @staticmethod
    def percentage(
        percentage: float,
        seed: int | None = None,
        rng: RandomSource | None = None,
        preserve_header: bool = False,
    ) -> PercentageSample:
        """
        Keep each record with probability ``percentage / 100``.

        Args:
            percentage: Chance (0-100) that each record is kept.
            seed: Random seed for reproducibility.
            rng: Explicit random source.
            preserve_header: Pass the first record through unsampled.

        Returns:
            A PercentageSample step.
        """
        return PercentageSample(
            percentage, seed=seed, rng=rng, preserve_header=preserve_header
        )

    @staticmethod
    def grouped(
        column: str,
        percentage: float,
        hasher: Hasher = python_hash,
    ) -> GroupedHashSample:
        """
        Keep the rows of about ``percentage`` percent of the keys in ``column``.

        Args:
            column: Header name of the grouping column.
            percentage: Chance (0-100) that a given key is kept.
            hasher: Key hash function.

        Returns:
            A GroupedHashSample step.
        """
        return GroupedHashSample(column, percentage, hasher=hasher)
