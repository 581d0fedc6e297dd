"""datasample - Streaming random sampling of records, lines and CSV rows."""

from datasample.core.types import Record, Row, RandomSource
from datasample.core.step import Step, Pipeline
from datasample.core.config import RunConfig, SampleConfig
from datasample.core.runner import Runner, run_pipeline
from datasample.core.rng import make_rng
from datasample.core.errors import (
    SamplingError,
    InvalidPercentageError,
    InvalidSampleSizeError,
    ColumnNotFoundError,
    RowDecodeError,
)
from datasample.sources.source import Source, LineSource, CsvSource
from datasample.transforms.sample import Sample
from datasample.transforms.reservoir import ReservoirSample, reservoir_select
from datasample.transforms.bernoulli import PercentageSample, bernoulli_select
from datasample.transforms.grouped import (
    GroupedHashSample,
    GroupedHashSampler,
    grouped_hash_select,
    python_hash,
    blake2b_hash,
)
from datasample.sinks.sink import Sink, LineSink, CsvSink, ListSink

__all__ = [
    "Record",
    "Row",
    "RandomSource",
    "Step",
    "Pipeline",
    "RunConfig",
    "SampleConfig",
    "Runner",
    "run_pipeline",
    "make_rng",
    "SamplingError",
    "InvalidPercentageError",
    "InvalidSampleSizeError",
    "ColumnNotFoundError",
    "RowDecodeError",
    "Source",
    "LineSource",
    "CsvSource",
    "Sample",
    "ReservoirSample",
    "reservoir_select",
    "PercentageSample",
    "bernoulli_select",
    "GroupedHashSample",
    "GroupedHashSampler",
    "grouped_hash_select",
    "python_hash",
    "blake2b_hash",
    "Sink",
    "LineSink",
    "CsvSink",
    "ListSink",
]
