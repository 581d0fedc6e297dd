"""Sink classes for writing sampled records."""

import csv
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TextIO

from loguru import logger

from datasample.core.step import Step
from datasample.core.types import Record


@contextmanager
def _opened(target: str | Path | TextIO, newline: str | None = None) -> Iterator[TextIO]:
    """Open ``target`` for writing if it is a path, otherwise use the stream."""
    if isinstance(target, (str, Path)):
        path = Path(target)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline=newline) as f:
            yield f
    else:
        yield target


class Sink(Step):
    """Factory class for creating sink steps."""

    @staticmethod
    def lines(target: str | Path | TextIO) -> "LineSink":
        """Create a sink writing one record per line."""
        return LineSink(target)

    @staticmethod
    def csv(target: str | Path | TextIO, **kwargs) -> "CsvSink":
        """Create a CSV sink for row records."""
        return CsvSink(target, **kwargs)

    @staticmethod
    def list() -> "ListSink":
        """Create a list sink that collects records in memory."""
        return ListSink()


class LineSink(Step):
    """Write records as lines of text."""

    def __init__(self, target: str | Path | TextIO) -> None:
        super().__init__()
        self._target = target

    def process(self, records: Iterable[Record]) -> Iterable[Record]:
        """Write each record on its own line and pass it through."""
        count = 0

        with _opened(self._target) as f:
            for record in records:
                f.write(f"{record}\n")
                count += 1
                yield record

        logger.info(f"Wrote {count} lines")


class CsvSink(Step):
    """Write row records as CSV."""

    def __init__(
        self,
        target: str | Path | TextIO,
        delimiter: str = ",",
        **kwargs,
    ) -> None:
        super().__init__()
        self._target = target
        self._delimiter = delimiter
        self._kwargs = kwargs

    def process(self, records: Iterable[Record]) -> Iterable[Record]:
        """Write each row and pass it through."""
        count = 0

        with _opened(self._target, newline="") as f:
            writer = csv.writer(
                f, delimiter=self._delimiter, lineterminator="\n", **self._kwargs
            )
            for record in records:
                writer.writerow(record)
                count += 1
                yield record

        logger.info(f"Wrote {count} CSV rows")


class ListSink(Step):
    """Collect records into a list (for testing)."""

    def __init__(self) -> None:
        super().__init__()
        self.records: list[Record] = []

    def process(self, records: Iterable[Record]) -> Iterable[Record]:
        """Collect records from this run and pass them through."""
        self.records = []
        for record in records:
            self.records.append(record)
            yield record

        logger.info(f"Collected {len(self.records)} records")
