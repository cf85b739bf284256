"""
Runtime Module
==============

Worker tasks and the coordinator that fans them out and merges results.
"""

from traffic_census.runtime.coordinator import Coordinator, WorkerFailure, WorkerTimeout
from traffic_census.runtime.worker import PartitionDecodeError, WorkerTask, run_worker_task

__all__ = [
    "Coordinator",
    "WorkerFailure",
    "WorkerTimeout",
    "PartitionDecodeError",
    "WorkerTask",
    "run_worker_task",
]
