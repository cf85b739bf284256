"""
Report Models
=============

This module defines the output contract of an aggregation run.

Output Contract:
    {
        "report": {
            "top_n": 3,
            "groups": [
                {
                    "day": null,
                    "hour": 8,
                    "entries": [
                        {"light_id": "L1", "count": 7},
                        {"light_id": "L2", "count": 3}
                    ]
                }
            ]
        },
        "summary": {
            "workers": 2,
            "records_total": 4,
            "records_parsed": 3,
            "parse_failures": 1,
            "buckets": 2,
            "days": 0,
            "elapsed_seconds": 0.012
        },
        "failures": [
            {"line_number": 4, "line": "08:40 L3 x", "reason": "..."}
        ]
    }

Design Rules:
    - Entries within a group are strictly non-increasing by count
    - Groups with no lights are never emitted
    - Output is deterministic for a given multiset of observations
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from traffic_census.models.observation import ParseFailure


class LightCount(BaseModel):
    """One ranked light within a time bucket."""

    light_id: str = Field(..., min_length=1, description="Traffic light identifier")
    count: int = Field(..., ge=0, description="Total cars counted in the bucket")


class BucketRanking(BaseModel):
    """
    Ranked lights for a single (day, hour) bucket group.

    Attributes:
        day: Calendar date, or None for hour-only logs
        hour: Hour of day (0-23)
        entries: Up to top_n lights, highest count first
    """

    day: Optional[str] = Field(default=None, description="Calendar date (YYYY-MM-DD)")
    hour: int = Field(..., ge=0, le=23, description="Hour of day")
    entries: List[LightCount] = Field(default_factory=list)


class RankedReport(BaseModel):
    """Top-N lights for every non-empty time bucket, in (day, hour) order."""

    top_n: int = Field(..., ge=1, description="Maximum entries per bucket")
    groups: List[BucketRanking] = Field(default_factory=list)

    @property
    def days(self) -> List[Optional[str]]:
        """Distinct days in report order."""
        seen: List[Optional[str]] = []
        for group in self.groups:
            if group.day not in seen:
                seen.append(group.day)
        return seen

    def group_for(self, hour: int, day: Optional[str] = None) -> Optional[BucketRanking]:
        """Look up the ranking for one bucket group, if present."""
        for group in self.groups:
            if group.hour == hour and group.day == day:
                return group
        return None


class RunSummary(BaseModel):
    """Run-level counters for observability."""

    workers: int = Field(..., ge=1)
    records_total: int = Field(default=0, ge=0)
    records_parsed: int = Field(default=0, ge=0)
    parse_failures: int = Field(default=0, ge=0)
    buckets: int = Field(default=0, ge=0)
    days: int = Field(default=0, ge=0)
    elapsed_seconds: float = Field(default=0.0, ge=0)


class PipelineResult(BaseModel):
    """Complete outcome of a successful run."""

    report: RankedReport
    summary: RunSummary
    failures: List[ParseFailure] = Field(default_factory=list)

    def to_dict(self) -> dict:
        """Export as dictionary for logging/serialization."""
        return {
            "report": self.report.model_dump(),
            "summary": self.summary.model_dump(),
            "failures": [failure.to_dict() for failure in self.failures],
        }
