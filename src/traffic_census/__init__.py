"""
Traffic Census
==============

Distributed aggregation of traffic light vehicle counts.

This package reads a log of timestamped per-light car counts, splits it
across a fleet of workers, merges their partial per-hour (and per-day)
totals and reports the most congested lights in every time bucket.

Components:
    - parsing: Line -> Observation
    - aggregation: BucketAggregator, Partitioner, TopNRanker
    - runtime: WorkerTask and the Coordinator fan-out/fan-in
    - ingest: Input file loading
    - observability: Report rendering

Example:
    from traffic_census import Coordinator

    result = Coordinator(workers=4).run_file("traffic.log")
    for group in result.report.groups:
        print(group.hour, group.entries)
"""

__version__ = "0.1.0"

from traffic_census.aggregation import BucketAggregator, Partitioner, TopNRanker
from traffic_census.config import ConfigurationError
from traffic_census.ingest import InputFileError
from traffic_census.parsing import ParseError, RecordParser
from traffic_census.runtime import (
    Coordinator,
    PartitionDecodeError,
    WorkerFailure,
    WorkerTask,
    WorkerTimeout,
)

__all__ = [
    "__version__",
    "BucketAggregator",
    "Partitioner",
    "TopNRanker",
    "RecordParser",
    "WorkerTask",
    "Coordinator",
    # Errors
    "ParseError",
    "ConfigurationError",
    "InputFileError",
    "PartitionDecodeError",
    "WorkerFailure",
    "WorkerTimeout",
]
