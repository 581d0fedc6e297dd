"""Source steps for reading records from text streams and files."""

import csv
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TextIO

from loguru import logger

from datasample.core.errors import RowDecodeError
from datasample.core.step import Step
from datasample.core.types import Record, Row


@contextmanager
def _opened(target: str | Path | TextIO, newline: str | None = None) -> Iterator[TextIO]:
    """Open ``target`` if it is a path, otherwise use the stream as-is."""
    if isinstance(target, (str, Path)):
        with open(target, "r", encoding="utf-8", newline=newline) as f:
            yield f
    else:
        yield target


class ListSource(Step):
    """Load data from a Python list."""

    def __init__(self, records: list[Record]) -> None:
        """
        Initialize a list source.

        Args:
            records: List of records to load.
        """
        super().__init__()
        self._records = records

    def process(self, records: Iterable[Record]) -> Iterable[Record]:
        """Yield records from the list."""
        logger.info(f"Loading {len(self._records)} records from list")
        yield from self._records


class LineSource(Step):
    """Read one record per line of text."""

    def __init__(self, target: str | Path | TextIO) -> None:
        """
        Initialize a line source.

        Args:
            target: Path to a text file, or an open text stream (e.g. stdin).
        """
        super().__init__()
        self._target = target

    def process(self, records: Iterable[Record]) -> Iterable[Record]:
        """Yield lines without their line terminator."""
        with _opened(self._target) as stream:
            line_number = 0
            lines = iter(stream)
            while True:
                try:
                    line = next(lines)
                except StopIteration:
                    break
                except UnicodeDecodeError as e:
                    raise RowDecodeError(str(e), line_number + 1) from e
                line_number += 1
                if line.endswith("\n"):
                    line = line[:-1]
                    if line.endswith("\r"):
                        line = line[:-1]
                yield line

        logger.debug(f"Read {line_number} lines")


class CsvSource(Step):
    """Read CSV rows as lists of trimmed fields, header first."""

    def __init__(
        self,
        target: str | Path | TextIO,
        delimiter: str = ",",
        strict: bool = True,
        **kwargs,
    ) -> None:
        """
        Initialize a CSV source.

        Args:
            target: Path to a CSV file, or an open text stream.
            delimiter: Field separator.
            strict: Reject malformed quoting instead of guessing.
            **kwargs: Additional arguments passed to csv.reader.
        """
        super().__init__()
        self._target = target
        self._delimiter = delimiter
        self._strict = strict
        self._kwargs = kwargs

    def process(self, records: Iterable[Record]) -> Iterable[Row]:
        """Yield decoded rows. Blank lines are skipped."""
        with _opened(self._target, newline="") as stream:
            reader = csv.reader(
                stream, delimiter=self._delimiter, strict=self._strict, **self._kwargs
            )
            while True:
                try:
                    fields = next(reader)
                except StopIteration:
                    break
                except (csv.Error, UnicodeDecodeError) as e:
                    raise RowDecodeError(str(e), reader.line_num) from e
                if not fields:
                    continue
                yield [field.strip() for field in fields]

            logger.debug(f"Read {reader.line_num} CSV lines")


class Source:
    """Factory class for creating source steps."""

    @staticmethod
    def lines(target: str | Path | TextIO) -> LineSource:
        """
        Read one record per line.

        Args:
            target: Path to a text file, or an open text stream.

        Returns:
            A LineSource step.

        Examples:
            >>> Source.lines("data.txt")
            >>> Source.lines(sys.stdin)
        """
        return LineSource(target)

    @staticmethod
    def csv(target: str | Path | TextIO, **kwargs) -> CsvSource:
        """
        Read CSV rows, header first.

        Args:
            target: Path to a CSV file, or an open text stream.
            **kwargs: Additional arguments passed to CsvSource.

        Returns:
            A CsvSource step.
        """
        return CsvSource(target, **kwargs)

    @staticmethod
    def list(records: list[Record]) -> ListSource:
        """
        Load data from a Python list.

        Args:
            records: List of records.

        Returns:
            A ListSource step.

        Example:
            >>> Source.list(["a", "b", "c"])
        """
        return ListSource(records)
