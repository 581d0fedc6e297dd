"""Core types and base classes for datasample."""

from datasample.core.types import Record, Row, RandomSource
from datasample.core.step import Step, Pipeline

__all__ = ["Record", "Row", "RandomSource", "Step", "Pipeline"]
