"""
Top-N Ranker
============

Selects the most congested lights for every time bucket group.

Ordering:
    - Groups: ascending (day, hour); hour-only groups have day=None
    - Entries: descending count, ties broken by ascending light_id
    - Each group is truncated to the first top_n entries
    - Groups without lights are omitted
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from traffic_census.aggregation.aggregator import BucketAggregator
from traffic_census.models.report import BucketRanking, LightCount, RankedReport


logger = logging.getLogger(__name__)


class TopNRanker:
    """
    Deterministic top-N ranking over a completed aggregate.

    Example:
        report = TopNRanker(top_n=3).rank(aggregator)
        for group in report.groups:
            print(group.hour, [e.light_id for e in group.entries])
    """

    def __init__(self, top_n: int = 3) -> None:
        if top_n < 1:
            raise ValueError("top_n must be >= 1")
        self.top_n = top_n

    def rank_group(self, pairs: Iterable[Tuple[str, int]]) -> List[LightCount]:
        """Order (light_id, count) pairs of one bucket and keep the first top_n."""
        ordered = sorted(pairs, key=lambda pair: (-pair[1], pair[0]))
        return [
            LightCount(light_id=light_id, count=count)
            for light_id, count in ordered[: self.top_n]
        ]

    def rank(self, aggregate: BucketAggregator) -> RankedReport:
        """Build the report for every non-empty (day, hour) group."""
        groups: Dict[Tuple[Optional[str], int], List[Tuple[str, int]]] = defaultdict(list)
        for key, count in aggregate.items():
            groups[(key.day, key.hour)].append((key.light_id, count))

        rankings = [
            BucketRanking(day=day, hour=hour, entries=self.rank_group(pairs))
            for (day, hour), pairs in sorted(
                groups.items(), key=lambda item: (item[0][0] or "", item[0][1])
            )
            if pairs
        ]

        logger.debug(f"Ranked {len(rankings)} bucket groups (top_n={self.top_n})")
        return RankedReport(top_n=self.top_n, groups=rankings)
