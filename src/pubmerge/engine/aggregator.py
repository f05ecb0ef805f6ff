"""Aggregation across sources.

Chains the source processor over every source in an explicit order, then
computes metrics. The run is synchronous and performs no I/O besides
audit logging.
"""

import copy
import time
import traceback
from collections.abc import Mapping, Sequence

from pubmerge.audit.logger import AuditLogger
from pubmerge.matching.key_index import KeyIndex
from pubmerge.metrics.calculator import compute_aggregate_metrics
from pubmerge.models import SourceRecord
from pubmerge.utils import get_iso_timestamp

from .config import AggregationConfig, AggregationResult, validate_source_order
from .models import AggregationSummary, SourceStats
from .processor import process_source

__all__ = ["aggregate"]


def aggregate(
    records_by_source: Mapping[str, Sequence[SourceRecord]],
    source_order: Sequence[str],
    config: AggregationConfig | None = None,
    logger: AuditLogger | None = None,
) -> AggregationResult:
    """Merge per-source record lists into one canonical publication list.

    Sources are processed strictly in ``source_order``; sources listed
    there without records are skipped silently, and sources with records
    but missing from the order are skipped with a warning. Each pass runs
    against a working copy of the index that replaces the index only when
    the pass completes. A pass that raises is logged, recorded in
    ``summary.failed_sources`` and contributes nothing; the next source
    runs against the index as it was before the failed pass.

    Parameters
    ----------
    records_by_source : Mapping[str, Sequence[SourceRecord]]
        Normalized records per source name.
    source_order : Sequence[str]
        Processing order. Takes precedence over ``config.source_order``.
    config : AggregationConfig | None, optional
        Thresholds, authority and merge policies. Uses defaults if None.
    logger : AuditLogger | None, optional
        Audit logger.

    Returns
    -------
    AggregationResult
        Publications sorted by total citations (descending, stable),
        aggregate metrics and run summary.

    Raises
    ------
    TypeError
        If ``source_order`` is None.
    ValueError
        If ``source_order`` lists a source twice.

    Examples
    --------
    >>> result = aggregate({"scholar": records}, ["scholar"])  # doctest: +SKIP
    >>> result.metrics.h_index  # doctest: +SKIP
    4
    """
    order = validate_source_order(source_order)
    if config is None:
        config = AggregationConfig(source_order=order)

    start_time = time.perf_counter()
    index = KeyIndex(config.thresholds)
    summary = AggregationSummary(timestamp=get_iso_timestamp())

    for source in records_by_source:
        if source not in order:
            summary.skipped_sources.append(source)
            if logger:
                logger.source_skipped(source=source, reason="not in source_order")

    for source in order:
        records = records_by_source.get(source)
        if records is None:
            continue

        stats = SourceStats()
        source_start = time.perf_counter()
        if logger:
            logger.source_started(source=source, records=len(records))

        working = copy.deepcopy(index)
        try:
            process_source(working, source, records, config=config, logger=logger, stats=stats)
        except Exception as e:
            summary.failed_sources.append(source)
            # The partial pass is discarded; only input counters survive
            stats = SourceStats(received=stats.received, dropped=stats.dropped)
            if logger:
                logger.error(
                    exception_class=type(e).__name__,
                    message=str(e),
                    stage=source,
                    traceback=traceback.format_exc(),
                )
        else:
            index = working
            summary.sources_processed.append(source)
        finally:
            summary.add(source, stats)
            if logger:
                logger.source_finished(
                    source=source,
                    duration_seconds=time.perf_counter() - source_start,
                    counters=stats.to_dict(),
                )

    if logger:
        logger.set_stage("metrics")

    publications = list(index)
    metrics = compute_aggregate_metrics(
        publications,
        sources=[s for s in order if s in records_by_source],
        i10_threshold=config.i10_threshold,
    )
    publications.sort(key=lambda pub: pub.metrics.total_citations, reverse=True)

    if logger:
        logger.event(
            "metrics_computed",
            data={
                "total_publications": metrics.total_publications,
                "total_citations": metrics.total_citations,
                "h_index": metrics.h_index,
                "i10_index": metrics.i10_index,
                "duration_seconds": time.perf_counter() - start_time,
            },
        )
        logger.set_stage(None)

    return AggregationResult(publications=publications, metrics=metrics, summary=summary)
