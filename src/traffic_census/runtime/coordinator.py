"""
Coordinator
===========

Drives a complete aggregation run as a fan-out/fan-in:

    1. Load raw lines (blank lines discarded)
    2. Partition them across the worker fleet
    3. Dispatch one WorkerTask per worker to an executor
    4. Barrier: wait for every worker, or abort on failure/timeout
    5. Merge each WorkerResult exactly once, in worker_id order
    6. Rank the global aggregate and return the report

Failure Policy:
    Any worker exception or an expired barrier timeout aborts the run
    with WorkerFailure. No partial report is ever produced, since a
    missing partition would make every affected sum wrong.

Concurrency:
    Workers run in a ProcessPoolExecutor (default) or ThreadPoolExecutor.
    Only immutable task/result objects cross the boundary. The merge loop
    runs on the calling thread only.
"""

import logging
import time
from concurrent.futures import (
    FIRST_EXCEPTION,
    Executor,
    ProcessPoolExecutor,
    ThreadPoolExecutor,
    wait,
)
from pathlib import Path
from typing import Callable, Iterable, List, Sequence, Set, Union

from traffic_census.aggregation.aggregator import BucketAggregator
from traffic_census.aggregation.partitioner import Partitioner
from traffic_census.aggregation.ranker import TopNRanker
from traffic_census.config import ConfigurationError, Settings
from traffic_census.ingest.reader import load_lines
from traffic_census.models.report import PipelineResult, RunSummary
from traffic_census.models.result import WorkerResult
from traffic_census.parsing.record_parser import RecordSchema
from traffic_census.runtime.worker import WorkerTask, run_worker_task


logger = logging.getLogger(__name__)


class WorkerFailure(Exception):
    """A worker crashed, failed to respond, or returned an unusable result."""


class WorkerTimeout(WorkerFailure):
    """Workers did not return before the barrier timeout.

    Process workers are terminated. Thread workers cannot be stopped and
    keep running until the process exits.
    """


class Coordinator:
    """
    Owns one run's worker fleet and global aggregate.

    Each call to `run` builds a fresh aggregate, so a Coordinator can be
    reused and several can coexist in one process.

    Example:
        coordinator = Coordinator(workers=4, backend="thread")
        result = coordinator.run(["08:15 L1 5", "08:20 L2 3"])
        print(result.report.groups[0].entries)
    """

    def __init__(
        self,
        workers: int,
        backend: str = "process",
        top_n: int = 3,
        schema: str = RecordSchema.AUTO.value,
        encoding: str = "utf-8",
        worker_timeout_seconds: float = 300.0,
        worker_fn: Callable[[WorkerTask], WorkerResult] = run_worker_task,
    ) -> None:
        """
        Initialize coordinator.

        Args:
            workers: Size of the worker fleet (>= 1)
            backend: 'process' or 'thread'
            top_n: Lights reported per bucket group
            schema: Line layout ('auto', 'hourly', 'daily')
            encoding: Encoding of the raw input lines
            worker_timeout_seconds: Barrier timeout for the whole fleet
            worker_fn: Callable executed for each task (must be picklable
                for the process backend)

        Raises:
            ConfigurationError: Invalid topology or backend
        """
        self.partitioner = Partitioner(workers)
        if backend not in ("process", "thread"):
            raise ConfigurationError(f"Unknown worker backend: {backend}")
        if worker_timeout_seconds <= 0:
            raise ConfigurationError("worker_timeout_seconds must be positive")

        self.workers = workers
        self.backend = backend
        self.ranker = TopNRanker(top_n)
        self.schema = RecordSchema(schema).value
        self.encoding = encoding
        self.worker_timeout_seconds = worker_timeout_seconds
        self._worker_fn = worker_fn

        logger.info(
            f"Coordinator initialized: workers={workers}, backend={backend}, "
            f"top_n={top_n}, schema={self.schema}"
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Coordinator":
        """Build a coordinator from loaded configuration."""
        return cls(
            workers=settings.pipeline.resolved_workers,
            backend=settings.pipeline.backend,
            top_n=settings.report.top_n,
            schema=settings.pipeline.schema_mode,
            encoding=settings.pipeline.encoding,
            worker_timeout_seconds=settings.pipeline.worker_timeout_seconds,
        )

    def run_file(self, path: Union[str, Path]) -> PipelineResult:
        """
        Load `path` and run the pipeline over it.

        Raises:
            InputFileError: Input cannot be read (before any dispatch)
            WorkerFailure: Any worker failed or timed out
        """
        return self.run(load_lines(path))

    def run(self, lines: Sequence[Union[str, bytes]]) -> PipelineResult:
        """
        Run the pipeline over in-memory lines.

        Raises:
            WorkerFailure: Any worker failed or timed out
        """
        started = time.monotonic()
        records = [line for line in lines if line.strip()]

        tasks = [
            WorkerTask(
                worker_id=r.worker_id,
                lines=list(chunk),
                start=r.start,
                schema=self.schema,
                encoding=self.encoding,
            )
            for r, chunk in self.partitioner.slice(records)
        ]

        results = self._dispatch(tasks)

        aggregate = BucketAggregator()
        self._merge_all(aggregate, results)

        report = self.ranker.rank(aggregate)
        failures = sorted(
            (failure for result in results for failure in result.failures),
            key=lambda failure: failure.line_number,
        )
        summary = RunSummary(
            workers=self.workers,
            records_total=len(records),
            records_parsed=sum(result.records_parsed for result in results),
            parse_failures=len(failures),
            buckets=len(aggregate),
            days=len(aggregate.days()),
            elapsed_seconds=round(time.monotonic() - started, 6),
        )

        logger.info(
            f"Run complete: records={summary.records_total}, parsed={summary.records_parsed}, "
            f"failures={summary.parse_failures}, buckets={summary.buckets}, "
            f"elapsed={summary.elapsed_seconds:.3f}s"
        )
        return PipelineResult(report=report, summary=summary, failures=failures)

    def _make_executor(self) -> Executor:
        if self.backend == "thread":
            return ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="census-worker")
        return ProcessPoolExecutor(max_workers=self.workers)

    def _dispatch(self, tasks: List[WorkerTask]) -> List[WorkerResult]:
        """Fan out all tasks and block until every one has returned."""
        executor = self._make_executor()
        aborted = True
        try:
            futures = {executor.submit(self._worker_fn, task): task for task in tasks}
            logger.debug(f"Dispatched {len(futures)} worker tasks")

            done, not_done = wait(
                futures,
                timeout=self.worker_timeout_seconds,
                return_when=FIRST_EXCEPTION,
            )

            results = []
            for future in sorted(done, key=lambda f: futures[f].worker_id):
                task = futures[future]
                error = future.exception()
                if error is not None:
                    logger.error(f"Worker {task.worker_id} failed: {error}")
                    raise WorkerFailure(f"worker {task.worker_id} failed: {error}") from error
                result = future.result()
                if not isinstance(result, WorkerResult):
                    raise WorkerFailure(
                        f"worker {task.worker_id} returned unexpected payload: {type(result).__name__}"
                    )
                results.append(result)

            if not_done:
                pending = sorted(futures[f].worker_id for f in not_done)
                logger.error(
                    f"Workers {pending} did not respond within "
                    f"{self.worker_timeout_seconds}s, aborting run"
                )
                raise WorkerTimeout(
                    f"workers {pending} did not respond within {self.worker_timeout_seconds}s"
                )

            aborted = False
            return results
        finally:
            if aborted:
                self._teardown(executor)
            else:
                executor.shutdown(wait=True)

    def _teardown(self, executor: Executor) -> None:
        """Stop the fleet without waiting for in-flight workers."""
        if isinstance(executor, ProcessPoolExecutor):
            terminate_workers = getattr(executor, "terminate_workers", None)
            if terminate_workers is not None:
                terminate_workers()
                return
            # shutdown() drops the process table, so collect it first
            processes = list((executor._processes or {}).values())
            for process in processes:
                if process.is_alive():
                    process.terminate()
            logger.warning(f"Terminated {len(processes)} worker processes")
        executor.shutdown(wait=False, cancel_futures=True)

    def _merge_all(self, aggregate: BucketAggregator, results: Iterable[WorkerResult]) -> None:
        """Merge every worker's partial into `aggregate`, each exactly once."""
        merged: Set[int] = set()
        for result in sorted(results, key=lambda r: r.worker_id):
            if result.worker_id in merged:
                raise WorkerFailure(f"duplicate result from worker {result.worker_id}")
            aggregate.merge(result.counts)
            merged.add(result.worker_id)
            logger.debug(
                f"Merged worker {result.worker_id}: buckets={result.bucket_count}, "
                f"days={result.day_count}, failures={len(result.failures)}"
            )

        expected = set(range(self.workers))
        if merged != expected:
            missing = sorted(expected - merged)
            raise WorkerFailure(f"missing results from workers {missing}")
