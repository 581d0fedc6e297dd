"""Error types raised by the sampling engine."""


class SamplingError(Exception):
    """Base class for all datasample errors."""

    pass


class InvalidPercentageError(SamplingError, ValueError):
    """Raised when a percentage lies outside [0, 100]."""

    def __init__(self, percentage: float) -> None:
        super().__init__(f"Percentage must be between 0 and 100, got {percentage}")
        self.percentage = percentage


class InvalidSampleSizeError(SamplingError, ValueError):
    """Raised when a reservoir sample size is smaller than 1."""

    def __init__(self, sample_size: int) -> None:
        super().__init__(f"Sample size must be a positive integer, got {sample_size}")
        self.sample_size = sample_size


class ColumnNotFoundError(SamplingError):
    """Raised when the grouping column is missing from the header."""

    def __init__(self, column: str, header: list[str] | None = None) -> None:
        super().__init__(f"Column '{column}' not found in CSV header")
        self.column = column
        self.header = list(header) if header is not None else []


class RowDecodeError(SamplingError):
    """Raised when an input row cannot be decoded.

    The stream is not resumed after this error: a broken row boundary means
    the following rows cannot be trusted either.
    """

    def __init__(self, message: str, line_number: int | None = None) -> None:
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number
