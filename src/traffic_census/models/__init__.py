"""
Data Models
===========

Typed data passed through the aggregation pipeline.

Models:
    Input:
        - Observation: One parsed vehicle count
        - BucketKey: (day, hour, light_id) aggregation key
        - ParseFailure: A skipped input line

    Worker:
        - WorkerResult: Partial aggregate returned by a worker

    Output:
        - LightCount, BucketRanking, RankedReport: Top-N report
        - RunSummary: Run-level counters
        - PipelineResult: Complete outcome of a run
"""

from traffic_census.models.observation import BucketKey, Observation, ParseFailure
from traffic_census.models.result import WorkerResult
from traffic_census.models.report import (
    BucketRanking,
    LightCount,
    PipelineResult,
    RankedReport,
    RunSummary,
)

__all__ = [
    # Input
    "BucketKey",
    "Observation",
    "ParseFailure",
    # Worker
    "WorkerResult",
    # Output
    "LightCount",
    "BucketRanking",
    "RankedReport",
    "RunSummary",
    "PipelineResult",
]
