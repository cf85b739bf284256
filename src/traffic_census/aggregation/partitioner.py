"""
Partitioner
===========

Balanced assignment of contiguous record ranges to workers.

With N records and W workers, base = N // W and remainder = N % W.
The first `remainder` workers receive base + 1 records, the rest
receive base. Ranges are contiguous, ordered, disjoint and together
cover exactly [0, N). The result depends only on N and W.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple, TypeVar

from traffic_census.config import ConfigurationError


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class PartitionRange:
    """Half-open record range [start, stop) assigned to one worker."""

    worker_id: int
    start: int
    stop: int

    @property
    def size(self) -> int:
        return self.stop - self.start


class Partitioner:
    """
    Splits a record count across a fixed number of workers.

    Example:
        ranges = Partitioner(worker_count=3).split(10)
        # [(0, 0, 4), (1, 4, 7), (2, 7, 10)]
    """

    def __init__(self, worker_count: int) -> None:
        """
        Args:
            worker_count: Number of workers. Must be >= 1.

        Raises:
            ConfigurationError: worker_count < 1
        """
        if worker_count < 1:
            raise ConfigurationError(
                f"At least one worker is required, got worker_count={worker_count}"
            )
        self.worker_count = worker_count

    def split(self, total_records: int) -> List[PartitionRange]:
        """Compute one range per worker covering [0, total_records)."""
        if total_records < 0:
            raise ValueError("total_records must be non-negative")

        base, remainder = divmod(total_records, self.worker_count)
        ranges = []
        offset = 0
        for worker_id in range(self.worker_count):
            size = base + 1 if worker_id < remainder else base
            ranges.append(PartitionRange(worker_id, offset, offset + size))
            offset += size

        logger.debug(
            f"Partitioned {total_records} records over {self.worker_count} workers "
            f"(base={base}, remainder={remainder})"
        )
        return ranges

    def slice(self, records: Sequence[T]) -> List[Tuple[PartitionRange, Sequence[T]]]:
        """Pair each worker's range with its slice of `records`."""
        return [(r, records[r.start:r.stop]) for r in self.split(len(records))]
