"""
Aggregation Module
==================

Partitioning, partial aggregation and ranking of vehicle counts.
"""

from traffic_census.aggregation.aggregator import BucketAggregator
from traffic_census.aggregation.partitioner import PartitionRange, Partitioner
from traffic_census.aggregation.ranker import TopNRanker

__all__ = ["BucketAggregator", "PartitionRange", "Partitioner", "TopNRanker"]
