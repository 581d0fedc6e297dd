"""Configuration for sampling runs."""

from dataclasses import dataclass

from pydantic import BaseModel, Field, field_validator, model_validator


@dataclass
class RunConfig:
    """Configuration for pipeline execution."""

    limit: int | None = None
    """Process only first N records from source."""


class SampleConfig(BaseModel):
    """
    Configuration for one sampling invocation.

    Exactly one of ``sample_size`` and ``percentage`` selects the algorithm.
    Grouped sampling is enabled by ``hash_column`` and only works on CSV
    input with a percentage.
    """

    sample_size: int | None = Field(
        default=None,
        ge=1,
        description="Number of records to keep with reservoir sampling",
    )

    percentage: float | None = Field(
        default=None,
        ge=0.0,
        le=100.0,
        description="Chance (0-100) that each record is kept",
    )

    csv_mode: bool = Field(
        default=False,
        description="Treat the first line as a header that is never sampled",
    )

    seed: int | None = Field(
        default=None,
        ge=0,
        description="Fixed random seed for reproducible output",
    )

    hash_column: str | None = Field(
        default=None,
        description="Column whose value decides inclusion for all its rows",
    )

    log_level: str = "WARNING"

    @field_validator("hash_column")
    @classmethod
    def validate_hash_column(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("hash column name must not be empty")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return level

    @model_validator(mode="after")
    def validate_mode(self) -> "SampleConfig":
        if self.sample_size is not None and self.percentage is not None:
            raise ValueError("sample size and percentage cannot be used together")
        if self.sample_size is None and self.percentage is None:
            raise ValueError("either sample size or percentage must be specified")
        if self.hash_column is not None:
            if not self.csv_mode:
                raise ValueError("hash-based sampling requires CSV mode")
            if self.percentage is None:
                raise ValueError("hash-based sampling requires a percentage")
        return self

    @property
    def mode(self) -> str:
        """Return the selected algorithm: reservoir, percentage or grouped."""
        if self.hash_column is not None:
            return "grouped"
        if self.sample_size is not None:
            return "reservoir"
        return "percentage"
