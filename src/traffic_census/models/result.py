"""
Worker Result Model
===================

The partial aggregate a worker hands back to the coordinator.

A WorkerResult is built once, at the end of a worker's run, and is the
only object that crosses the worker -> coordinator boundary. After it is
sent the worker keeps no reference to it.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from traffic_census.models.observation import BucketKey, ParseFailure


@dataclass
class WorkerResult:
    """
    Partial aggregate produced by one worker.

    Attributes:
        worker_id: Index of the worker that produced this result
        counts: Mapping of bucket key to summed car count
        records_seen: Number of lines in the worker's partition
        failures: Lines the worker could not parse
    """

    worker_id: int
    counts: Dict[BucketKey, int] = field(default_factory=dict)
    records_seen: int = 0
    failures: List[ParseFailure] = field(default_factory=list)

    @property
    def records_parsed(self) -> int:
        """Lines that contributed to `counts`."""
        return self.records_seen - len(self.failures)

    @property
    def bucket_count(self) -> int:
        """Distinct buckets discovered by this worker."""
        return len(self.counts)

    @property
    def day_count(self) -> int:
        """Distinct days discovered by this worker (0 for hour-only logs)."""
        return len({key.day for key in self.counts if key.day is not None})

    def __repr__(self) -> str:
        return (
            f"WorkerResult(worker={self.worker_id}, buckets={self.bucket_count}, "
            f"seen={self.records_seen}, failures={len(self.failures)})"
        )
