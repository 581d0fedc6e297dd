"""Key-consistent percentage sampling over tabular rows."""

import csv
import hashlib
from collections.abc import Callable, Iterable, Iterator
from typing import TextIO

from loguru import logger

from datasample.core.errors import ColumnNotFoundError, RowDecodeError
from datasample.core.step import Step
from datasample.core.types import Record, Row
from datasample.transforms.bernoulli import validate_percentage

HASH_MAX = 2**64 - 1
"""Largest value a key hasher may return."""

Hasher = Callable[[str], int]


def python_hash(value: str) -> int:
    """
    Hash a key with the interpreter's string hash, as an unsigned 64-bit int.

    Stable for the lifetime of the process only: string hashing is salted
    per process unless ``PYTHONHASHSEED`` is fixed.
    """
    return hash(value) & HASH_MAX


def blake2b_hash(value: str) -> int:
    """Hash a key with 64-bit BLAKE2b. Stable across processes and platforms."""
    digest = hashlib.blake2b(value.encode("utf-8"), digest_size=8).digest()
    return int.from_bytes(digest, "big")


class GroupedHashSampler:
    """
    Streaming sampler that keeps or drops whole groups of rows.

    The decision for a row depends only on the value of one designated
    column: its hash, scaled onto [0, 1] by ``HASH_MAX``, must fall strictly
    below the probability. Rows sharing a value are therefore always kept
    or dropped together, with no memory of keys already seen.

    The first row pulled from ``rows`` is the header. It is exposed through
    :attr:`header` and is never sampled.

    Examples:
        >>> sampler = GroupedHashSampler(rows, 10, "user_id")
        >>> writer.writerow(sampler.header)
        >>> writer.writerows(sampler)
    """

    def __init__(
        self,
        rows: Iterable[Row],
        percentage: float,
        column_name: str,
        hasher: Hasher = python_hash,
    ) -> None:
        """
        Initialize the sampler and read the header.

        Args:
            rows: Tabular rows, header first.
            percentage: Chance (0-100) that a given key is kept.
            column_name: Header name of the grouping column.
            hasher: Key hash function returning ints in ``[0, HASH_MAX]``.

        Raises:
            InvalidPercentageError: If ``percentage`` is outside [0, 100].
            RowDecodeError: If the header row cannot be decoded.
            ColumnNotFoundError: If no header field matches ``column_name``.
        """
        self._probability = validate_percentage(percentage)
        self._percentage = percentage
        self._hasher = hasher
        self._rows = iter(rows)
        self._done = False

        self._header: Row = self._read_header()
        self._column_index = self._find_column(column_name)
        self._column_name = column_name

    @classmethod
    def from_csv(
        cls,
        stream: TextIO,
        percentage: float,
        column_name: str,
        hasher: Hasher = python_hash,
        **kwargs,
    ) -> "GroupedHashSampler":
        """
        Build a sampler over a CSV text stream.

        Args:
            stream: Open text stream positioned at the header line.
            percentage: Chance (0-100) that a given key is kept.
            column_name: Header name of the grouping column.
            hasher: Key hash function.
            **kwargs: Additional arguments passed to CsvSource.
        """
        from datasample.sources.source import CsvSource

        rows = CsvSource(stream, **kwargs).process(())
        return cls(rows, percentage, column_name, hasher=hasher)

    def _read_header(self) -> Row:
        try:
            return list(next(self._rows))
        except StopIteration:
            self._done = True
            return []
        except csv.Error as e:
            self._done = True
            raise RowDecodeError(str(e)) from e
        except RowDecodeError:
            self._done = True
            raise

    def _find_column(self, column_name: str) -> int:
        wanted = column_name.strip()
        for index, name in enumerate(self._header):
            if name.strip() == wanted:
                return index
        raise ColumnNotFoundError(column_name, self._header)

    @property
    def header(self) -> Row:
        """Return the header row as read from the input."""
        return self._header

    @property
    def column_index(self) -> int:
        """Return the position of the grouping column in the header."""
        return self._column_index

    def decide(self, value: str) -> bool:
        """Return whether rows with this key value are kept."""
        return self._hasher(value) / HASH_MAX < self._probability

    def __iter__(self) -> "GroupedHashSampler":
        return self

    def __next__(self) -> Row:
        while True:
            row = self._next_row()

            # Short rows cannot be decided; they are passed through.
            if self._column_index >= len(row):
                return row

            if self.decide(row[self._column_index]):
                return row

    def _next_row(self) -> Row:
        if self._done:
            raise StopIteration
        try:
            return next(self._rows)
        except StopIteration:
            self._done = True
            raise
        except csv.Error as e:
            self._done = True
            raise RowDecodeError(str(e)) from e
        except RowDecodeError:
            self._done = True
            raise

    def collect_all(self) -> list[Row]:
        """Return all remaining kept rows."""
        return list(self)

    def __repr__(self) -> str:
        return (
            f"GroupedHashSampler(percentage={self._percentage}, "
            f"column={self._column_name!r}, column_index={self._column_index}, "
            f"done={self._done})"
        )


def grouped_hash_select(
    rows: Iterable[Row],
    percentage: float,
    column_name: str,
    hasher: Hasher = python_hash,
) -> tuple[Row, Iterator[Row]]:
    """
    Split tabular rows into their header and a lazy stream of kept rows.

    Args:
        rows: Tabular rows, header first.
        percentage: Chance (0-100) that a given key is kept.
        column_name: Header name of the grouping column.
        hasher: Key hash function.

    Returns:
        The header and an iterator over the kept rows.
    """
    sampler = GroupedHashSampler(rows, percentage, column_name, hasher=hasher)
    return sampler.header, sampler


class GroupedHashSample(Step):
    """
    Keep all rows of a randomly chosen share of keys.

    The first incoming row is the header; it is emitted first and never
    sampled. Header validation happens when the first record is pulled.

    Examples:
        >>> GroupedHashSample("user_id", 10)
        >>> GroupedHashSample("session", 50, hasher=blake2b_hash)
    """

    def __init__(
        self,
        column: str,
        percentage: float,
        *,
        hasher: Hasher = python_hash,
    ) -> None:
        """
        Initialize a GroupedHashSample step.

        Args:
            column: Header name of the grouping column.
            percentage: Chance (0-100) that a given key is kept.
            hasher: Key hash function.
        """
        super().__init__()
        validate_percentage(percentage)

        self._column = column
        self._percentage = percentage
        self._hasher = hasher

    def process(self, records: Iterable[Record]) -> Iterable[Record]:
        """Yield the header followed by rows whose key is kept."""
        sampler = GroupedHashSampler(
            records, self._percentage, self._column, hasher=self._hasher
        )
        logger.info(
            f"Sampling {self._percentage}% of keys in column '{self._column}' "
            f"(index {sampler.column_index})"
        )
        yield sampler.header

        kept = 0
        for row in sampler:
            kept += 1
            yield row

        logger.info(f"Kept {kept} rows")
