"""Source steps for datasample."""

from datasample.sources.source import Source, ListSource, LineSource, CsvSource

__all__ = ["Source", "ListSource", "LineSource", "CsvSource"]
