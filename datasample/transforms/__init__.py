"""Sampling steps for datasample."""

from datasample.transforms.sample import Sample
from datasample.transforms.reservoir import ReservoirSample, reservoir_select
from datasample.transforms.bernoulli import PercentageSample, bernoulli_select
from datasample.transforms.grouped import (
    GroupedHashSample,
    GroupedHashSampler,
    grouped_hash_select,
    python_hash,
    blake2b_hash,
    HASH_MAX,
)

__all__ = [
    "Sample", "ReservoirSample", "reservoir_select",
    "PercentageSample", "bernoulli_select",
    "GroupedHashSample", "GroupedHashSampler", "grouped_hash_select",
    "python_hash", "blake2b_hash", "HASH_MAX",
]
