"""
Bucket Aggregator
=================

Running car-count totals keyed by (day, hour, light_id).

Summation makes the aggregate a commutative monoid under `merge`:
partial aggregates built independently and merged in any order equal a
single sequential aggregation of the same observations.

Concurrency:
    No internal locking. Each worker owns a private aggregator and the
    coordinator merges results one at a time on its own thread.
"""

import logging
from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union

from traffic_census.models.observation import BucketKey, Observation


logger = logging.getLogger(__name__)


class BucketAggregator:
    """
    Mapping from BucketKey to accumulated car count.

    Example:
        agg = BucketAggregator()
        agg.increment(BucketKey(None, 8, "L1"), 5)
        agg.add(Observation(hour=8, light_id="L1", car_count=2))
        assert agg[BucketKey(None, 8, "L1")] == 7
    """

    def __init__(self, counts: Optional[Mapping[BucketKey, int]] = None) -> None:
        self._counts: Dict[BucketKey, int] = {}
        if counts:
            self.merge(counts)

    def increment(self, key: BucketKey, amount: int) -> None:
        """Add `amount` to the count for `key`, inserting the key if new."""
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise ValueError(f"amount must be an integer, got {amount!r}")
        if amount < 0:
            raise ValueError(f"amount must be non-negative, got {amount}")
        self._counts[key] = self._counts.get(key, 0) + amount

    def add(self, observation: Observation) -> None:
        """Fold one observation into its bucket."""
        self.increment(observation.key, observation.car_count)

    def merge(self, other: Union["BucketAggregator", Mapping[BucketKey, int]]) -> None:
        """
        Add every count of `other` into this aggregator.

        Merging the same partial twice double-counts it; callers merge
        each partial exactly once.
        """
        for key, amount in other.items():
            self.increment(BucketKey(*key), amount)

    def __getitem__(self, key: BucketKey) -> int:
        return self._counts.get(key, 0)

    def __contains__(self, key: object) -> bool:
        return key in self._counts

    def __len__(self) -> int:
        return len(self._counts)

    def __iter__(self) -> Iterator[BucketKey]:
        return iter(self._counts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BucketAggregator):
            return NotImplemented
        return self._counts == other._counts

    def __repr__(self) -> str:
        return f"BucketAggregator(buckets={len(self._counts)}, total={self.total})"

    def items(self) -> List[Tuple[BucketKey, int]]:
        return list(self._counts.items())

    @property
    def total(self) -> int:
        """Sum of all counts."""
        return sum(self._counts.values())

    def days(self) -> List[str]:
        """Distinct non-empty days, sorted."""
        return sorted({key.day for key in self._counts if key.day is not None})

    def snapshot(self) -> Dict[BucketKey, int]:
        """Independent copy of the counts, safe to send across a process boundary."""
        return dict(self._counts)
