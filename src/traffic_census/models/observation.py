"""
Observation Models
==================

Data models for parsed traffic observations and their aggregation keys.

These models are produced by the record parser and consumed immediately
by a bucket aggregator. Both are immutable and picklable so they can
cross worker process boundaries.
"""

from dataclasses import dataclass
from typing import NamedTuple, Optional


class BucketKey(NamedTuple):
    """
    Unit of aggregation: (day, hour, light_id).

    `day` is None for hour-only logs. Equality is exact; no
    normalization beyond what the parser performs.
    """

    day: Optional[str]
    hour: int
    light_id: str


@dataclass(frozen=True, slots=True)
class Observation:
    """
    One timestamped vehicle count for a traffic light.

    Produced by RecordParser, consumed by BucketAggregator.

    Attributes:
        hour: Hour of day the count was taken (0-23)
        light_id: Traffic light identifier
        car_count: Number of cars observed
        day: Calendar date (YYYY-MM-DD), absent in hour-only logs
    """

    hour: int
    light_id: str
    car_count: int
    day: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not 0 <= self.hour <= 23:
            raise ValueError("hour must be in 0-23")
        if not self.light_id:
            raise ValueError("light_id must be non-empty")
        if self.car_count < 0:
            raise ValueError("car_count must be non-negative")

    @property
    def key(self) -> BucketKey:
        """Bucket this observation contributes to."""
        return BucketKey(self.day, self.hour, self.light_id)


@dataclass(frozen=True)
class ParseFailure:
    """
    A skipped input line.

    Attributes:
        line_number: 1-based position among the non-blank input lines
        line: The raw line text
        reason: Why the line was rejected
    """

    line_number: int
    line: str
    reason: str

    def to_dict(self) -> dict:
        """Export as dictionary for logging/serialization."""
        return {
            "line_number": self.line_number,
            "line": self.line,
            "reason": self.reason,
        }
