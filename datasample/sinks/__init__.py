"""Sink steps for datasample."""

from datasample.sinks.sink import Sink, LineSink, CsvSink, ListSink

__all__ = ["Sink", "LineSink", "CsvSink", "ListSink"]
