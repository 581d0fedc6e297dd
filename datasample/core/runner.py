"""Pipeline execution engine."""

import itertools
import time
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from loguru import logger

from datasample.core.config import RunConfig
from datasample.core.types import Record

if TYPE_CHECKING:
    from datasample.core.step import Pipeline


class Runner:
    """
    Execution engine for pipelines.

    Records are pulled through the steps one at a time, so streaming steps
    never hold more than the record in flight. Steps that need the whole
    input (reservoir sampling) consume their upstream before emitting.
    """

    def __init__(self, pipeline: "Pipeline", config: RunConfig | None = None) -> None:
        """
        Initialize the runner.

        Args:
            pipeline: The pipeline to execute.
            config: Execution configuration. Uses defaults if None.
        """
        self.pipeline = pipeline
        self.config = config or RunConfig()
        self.counts: dict[str, int] = {}

    def stream(self) -> Iterator[Record]:
        """Yield output records lazily."""
        steps = self.pipeline.steps
        current: Iterable[Record] = iter(())

        for i, step in enumerate(steps):
            logger.debug(f"Wiring step {i}: {step.name}")
            current = step.process(current)
            if i == 0 and self.config.limit is not None:
                current = itertools.islice(current, self.config.limit)
            current = self._counted(current, i, step.name)

        yield from current

    def execute(self) -> list[Record]:
        """
        Execute the pipeline.

        Returns:
            List of output records.
        """
        return list(self.stream())

    def drain(self) -> int:
        """Run the pipeline for its side effects and return the output count."""
        start_time = time.time()
        total = 0
        for _ in self.stream():
            total += 1
        elapsed = time.time() - start_time
        logger.info(f"Pipeline produced {total} records ({elapsed:.2f}s)")
        return total

    def _counted(
        self, records: Iterable[Record], index: int, name: str
    ) -> Iterator[Record]:
        """Pass records through, logging the step's count once exhausted."""
        count = 0
        for record in records:
            count += 1
            yield record
        self.counts[name] = count
        logger.debug(f"Step {index} ({name}): {count} records")


def run_pipeline(
    pipeline: "Pipeline",
    limit: int | None = None,
    **kwargs,
) -> list[Record]:
    """
    Execute a pipeline with the runner.

    Args:
        pipeline: Pipeline to execute.
        limit: Process only first N source records.
        **kwargs: Additional RunConfig parameters.

    Returns:
        List of output records.
    """
    config = RunConfig(limit=limit, **kwargs)
    runner = Runner(pipeline, config)
    return runner.execute()
