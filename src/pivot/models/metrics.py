"""Observability metrics model for Pivot."""

from uuid import UUID

from pydantic import BaseModel, Field


class StepMetrics(BaseModel):
    """Observability metrics for a command.

    Every command invocation emits these metrics to stderr.
    """

    run_id: UUID = Field(
        ...,
        description="Correlation ID for this run",
    )

    step_name: str = Field(
        ...,
        description="Step identifier (e.g., 'build_timeline')",
    )

    duration_ms: int = Field(
        ...,
        ge=0,
        description="Execution time in milliseconds",
    )

    records_processed: int = Field(
        default=0,
        ge=0,
        description="Number of events normalized",
    )

    records_output: int = Field(
        default=0,
        ge=0,
        description="Number of events emitted",
    )

    bytes_read: int = Field(
        default=0,
        ge=0,
        description="Size of the input file",
    )

    findings: int = Field(
        default=0,
        ge=0,
        description="Number of rule findings",
    )

    errors: int = Field(
        default=0,
        ge=0,
        description="Error count",
    )

    model_config = {"extra": "forbid"}
