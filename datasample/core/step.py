"""Base Step and Pipeline classes for datasample."""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from datasample.core.types import Record


class Step(ABC):
    """Base class for all pipeline steps."""

    def __init__(self) -> None:
        self._name: str | None = None

    @abstractmethod
    def process(self, records: Iterable[Record]) -> Iterable[Record]:
        """Process input records and yield output records."""
        ...

    def as_step(self, name: str) -> "Step":
        """Assign a name to this step for logging and debugging."""
        self._name = name
        return self

    def __rshift__(self, other: "Step") -> "Pipeline":
        """Enable >> syntax for chaining steps."""
        return Pipeline([self, other])

    @property
    def name(self) -> str:
        """Return step name (auto-generated if not set)."""
        return self._name or self.__class__.__name__


class Pipeline(Step):
    """A sequence of steps that form a pipeline. A pipeline can itself be a step."""

    def __init__(self, steps: list[Step]) -> None:
        super().__init__()
        self._steps: list[Step] = steps

    def __rshift__(self, other: Step) -> "Pipeline":
        """Enable >> syntax for appending steps to pipeline."""
        if isinstance(other, Pipeline):
            return Pipeline(self._steps + other._steps)
        return Pipeline(self._steps + [other])

    def process(self, records: Iterable[Record]) -> Iterable[Record]:
        """Process records through all steps in sequence."""
        current = records
        for step in self._steps:
            current = step.process(current)
        return current

    @property
    def steps(self) -> list[Step]:
        """Return the list of steps in this pipeline."""
        return self._steps

    def run(self, limit: int | None = None, **kwargs) -> list[Record]:
        """
        Execute the pipeline and return all records.

        Args:
            limit: Process only first N source records.
            **kwargs: Additional RunConfig parameters.

        Returns:
            List of output records.
        """
        from datasample.core.runner import run_pipeline

        return run_pipeline(self, limit=limit, **kwargs)
