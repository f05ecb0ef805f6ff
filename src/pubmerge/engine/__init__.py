"""Aggregation engine.

Main Components
---------------
- aggregate: run all sources in order and compute metrics
- process_source: fold one source into the key index
- AggregationConfig / AggregationResult: run configuration and output
"""

from pubmerge.engine.aggregator import aggregate
from pubmerge.engine.config import AggregationConfig, AggregationResult
from pubmerge.engine.models import AggregationSummary, SourceStats
from pubmerge.engine.processor import process_source

__all__ = [
    "AggregationConfig",
    "AggregationResult",
    "AggregationSummary",
    "SourceStats",
    "aggregate",
    "process_source",
]
