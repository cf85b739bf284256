"""
Worker Task
===========

Aggregates one partition of raw log lines into a partial result.

This module:
    - Decodes the partition's raw lines (bytes or str)
    - Parses each line, recording failures without aborting
    - Feeds a private BucketAggregator
    - Returns a WorkerResult holding a snapshot of the counts

A worker touches no shared state. `run_worker_task` is a module-level
function so process pools can pickle it.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Union

from traffic_census.aggregation.aggregator import BucketAggregator
from traffic_census.models.observation import ParseFailure
from traffic_census.models.result import WorkerResult
from traffic_census.parsing.record_parser import ParseError, RecordParser, RecordSchema


logger = logging.getLogger(__name__)


class PartitionDecodeError(Exception):
    """A partition's raw bytes could not be decoded. Unrecoverable for the run."""


@dataclass
class WorkerTask:
    """
    One worker's unit of work.

    Attributes:
        worker_id: Index of the worker
        lines: The partition, in input order
        start: Offset of the partition's first line in the whole input
        schema: Line layout passed to RecordParser
        encoding: Encoding used for bytes lines
    """

    worker_id: int
    lines: Sequence[Union[str, bytes]] = field(default_factory=list)
    start: int = 0
    schema: str = RecordSchema.AUTO.value
    encoding: str = "utf-8"

    def run(self) -> WorkerResult:
        """
        Aggregate the partition.

        Raises:
            PartitionDecodeError: A bytes line is not valid in `encoding`
        """
        parser = RecordParser(self.schema)
        aggregator = BucketAggregator()
        failures: List[ParseFailure] = []

        for offset, raw in enumerate(self.lines):
            line_number = self.start + offset + 1
            line = self._decode(raw, line_number)
            try:
                observation = parser.parse(line)
            except ParseError as e:
                failures.append(ParseFailure(line_number, line, e.reason))
                logger.warning(f"[worker {self.worker_id}] skipping line {line_number}: {e}")
                continue
            aggregator.add(observation)

        result = WorkerResult(
            worker_id=self.worker_id,
            counts=aggregator.snapshot(),
            records_seen=len(self.lines),
            failures=failures,
        )
        logger.debug(f"[worker {self.worker_id}] finished: {result!r}")
        return result

    def _decode(self, raw: Union[str, bytes], line_number: int) -> str:
        if isinstance(raw, str):
            return raw
        try:
            return raw.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise PartitionDecodeError(
                f"worker {self.worker_id}: line {line_number} is not valid {self.encoding}: {e.reason}"
            ) from e


def run_worker_task(task: WorkerTask) -> WorkerResult:
    """Picklable entry point for executor dispatch."""
    return task.run()
